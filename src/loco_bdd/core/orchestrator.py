"""Execution of scenarios and features, called or top-level.

Steps of one scenario run strictly in order and execution stops at the
first step that does not pass. For called units the failure is converted
into a `CalledUnitError` carrying feature, scenario and line provenance;
for top-level units partial results are reported and returned instead.
"""

from concurrent.futures import ThreadPoolExecutor
from logging import getLogger
from typing import TYPE_CHECKING

from loco_bdd.context import VariableStore
from loco_bdd.errors import CalledUnitError, ErrorContext
from loco_bdd.schema import TOP_LEVEL, FeatureResult, ScenarioResult

from .backend import ScenarioBackend
from .dispatcher import run_step
from .env import ScriptEnv

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from loco_bdd.schema import CallContext, Feature, Scenario, StepResult

logger = getLogger(__name__)


def called_unit_error(feature_path: str, scenario: 'Scenario',
                      result: 'StepResult',
                      variables: 'Mapping[str, object] | None' = None) -> CalledUnitError:
    """Build the error raised for a failed step of a called unit.

    The message has the form
    `called: <path>[, scenario: <name>], line: <line>`, where the scenario
    part is omitted for blank names. Variables of the called unit at the
    moment of failure are attached to the error context.
    """
    scenario_name = scenario.name.strip() or None
    line = result.step.line

    message = f'called: {feature_path}'
    if scenario_name:
        message += f', scenario: {scenario_name}'
    message += f', line: {line}'

    return CalledUnitError(
        message,
        result.error,
        feature_path=feature_path,
        scenario_name=scenario_name,
        line=line,
        context=ErrorContext(
            feature_path=feature_path,
            scenario_name=scenario_name,
            line_num=line,
            step_text=f'{result.step}',
            variables=dict(variables) if variables else None,
        ),
    )


def call_scenario(scenario: 'Scenario', backend: ScenarioBackend) -> None:
    """Run the steps of a called scenario, failing fast.

    Args:
        scenario: Scenario to run.
        backend: Backend shared by all scenarios of the called feature.

    Raises:
        CalledUnitError: On the first step that does not pass.
    """
    backend.init_scenario(scenario)

    for step in scenario.steps:
        result = run_step(step, backend)
        if not result.is_pass:
            raise called_unit_error(
                backend.feature_path,
                scenario,
                result,
                backend.vars.snapshot(),
            ) from result.error


def call_feature(feature: 'Feature', call_context: 'CallContext', *,
                 env: ScriptEnv | None = None) -> VariableStore:
    """Run a called feature and return its final variables.

    Plain and outline-expanded scenarios run in declaration order on a
    single backend, so variables accumulate across scenarios.

    Args:
        feature: Feature to call.
        call_context: Context of the call, carrying caller inputs.
        env: Script environment of the caller.

    Returns:
        The variable store of the backend after the last scenario.

    Raises:
        CalledUnitError: If any step of the feature fails.
    """
    backend = ScenarioBackend((env or ScriptEnv()).for_feature(feature), call_context)
    logger.debug('calling %s at depth %d', feature.path, call_context.depth)

    try:
        for scenario in feature.iter_scenarios():
            call_scenario(scenario, backend)

    except CalledUnitError as error:
        logger.warning('%s', error.message)
        raise

    return backend.vars


def run_scenario(scenario: 'Scenario', backend: ScenarioBackend) -> ScenarioResult:
    """Run a top-level scenario, stopping at the first failure.

    Failures are reported through the backend and returned as data.

    Args:
        scenario: Scenario to run.
        backend: Fresh backend for the scenario.

    Returns:
        The scenario result with one step result per executed step.
    """
    backend.init_scenario(scenario)

    for step in scenario.steps:
        result = run_step(step, backend)
        if not result.is_pass:
            break

    return ScenarioResult(
        info=backend.info,
        results=tuple(backend.results),
    )


def run_feature(feature: 'Feature', env: ScriptEnv | None = None,
                call_context: 'CallContext' = TOP_LEVEL) -> FeatureResult:
    """Run every scenario of a top-level feature sequentially.

    Each scenario gets a fresh backend; a failing scenario does not
    affect its siblings.
    """
    env = (env or ScriptEnv()).for_feature(feature)

    scenarios = []
    variables: dict[str, object] = {}
    for scenario in feature.iter_scenarios():
        backend = ScenarioBackend(env, call_context)
        scenarios.append(run_scenario(scenario, backend))
        variables = backend.vars.snapshot()

    return FeatureResult(
        path=feature.path,
        scenarios=tuple(scenarios),
        variables=variables,
    )


class Runner:
    """Concurrent runner of top-level features.

    Scenarios are submitted to a thread pool sized by
    `EngineSettings.threads`. Each scenario runs on its own backend, so
    no mutable state is shared between workers. Results keep the order
    in which features and scenarios were declared.
    """

    def __init__(self, env: ScriptEnv | None = None) -> None:
        """Initialize a runner.

        Args:
            env: Script environment, built from settings if omitted.
        """
        self.env = env or ScriptEnv.from_settings()

    def run_scenario(self, env: ScriptEnv,
                     scenario: 'Scenario') -> tuple[ScenarioResult, VariableStore]:
        """Run a single scenario on a fresh backend."""
        backend = ScenarioBackend(env)

        return run_scenario(scenario, backend), backend.vars.snapshot()

    def run(self, features: 'Iterable[Feature]') -> list[FeatureResult]:
        """Run features and return their results in declaration order."""
        features = tuple(features)

        with ThreadPoolExecutor(max_workers=self.env.settings.threads) as executor:
            submitted = []
            for feature in features:
                env = self.env.for_feature(feature)
                submitted.append([
                    executor.submit(self.run_scenario, env, scenario)
                    for scenario in feature.iter_scenarios()
                ])

            results = []
            for feature, futures in zip(features, submitted, strict=True):
                outcomes = [future.result() for future in futures]
                results.append(FeatureResult(
                    path=feature.path,
                    scenarios=tuple(result for result, _ in outcomes),
                    variables=outcomes[-1][1] if outcomes else {},
                ))

        return results
