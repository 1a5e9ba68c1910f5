"""Scenario backend: the per-execution state step handlers work with.

A backend owns one variable store, one scenario-scoped evaluator with its
bindings, and the notification sink selected for its call context. It is
created once per top-level scenario, or once per called feature, and is
never shared between worker threads.
"""

from logging import getLogger
from typing import TYPE_CHECKING, Any

from loco_bdd.bindings import UNSET, ScriptBindings, ScriptBridge
from loco_bdd.context import VariableStore
from loco_bdd.evaluator import Evaluator
from loco_bdd.reporting import select_notifier
from loco_bdd.schema import TOP_LEVEL, ScenarioInfo
from loco_bdd.tags import resolve_tags

if TYPE_CHECKING:
    from loco_bdd.schema import CallContext, Feature, Scenario, Step, StepResult
    from loco_bdd.values import RuntimeValue

    from .env import ScriptEnv
    from .registry import StepRegistry

logger = getLogger(__name__)


class ScenarioBackend:
    """Execution state of a scenario or of a called feature."""

    def __init__(self, env: 'ScriptEnv',
                 call_context: 'CallContext' = TOP_LEVEL) -> None:
        """Initialize a backend.

        Caller inputs from the call context are copied into the new
        variable store before any step runs.

        Args:
            env: Script environment of the run.
            call_context: Context identifying a top-level or nested call.
        """
        self.env = env
        self.call_context = call_context

        self.vars = VariableStore(call_context.arguments)
        self.evaluator = Evaluator(allow_builtins=env.settings.allow_builtins)
        self.bindings = ScriptBindings(
            self.vars,
            self.evaluator,
            bridge=ScriptBridge(self),
            read_function=env.read_function,
        )
        self.notifier = select_notifier(env.reporter, call_context)

        self.tags: list[str] = []
        self.tag_values: dict[str, list[str]] = {}
        self.info: ScenarioInfo | None = None

        self.current_step: Step | None = None
        self.results: list[StepResult] = []

    @property
    def is_called(self) -> bool:
        """Return whether this backend runs a nested call."""
        return self.call_context.is_called

    @property
    def registry(self) -> 'StepRegistry':
        """Return the step registry of the run."""
        return self.env.registry

    @property
    def feature_path(self) -> str:
        """Return the path of the feature being executed."""
        return self.env.feature_path

    def init_scenario(self, scenario: 'Scenario') -> None:
        """Prepare the backend for a scenario.

        Resolves tags and takes the scenario snapshot before the first
        step executes. Step results of a previous scenario are dropped;
        variables are kept.
        """
        resolution = resolve_tags(scenario.tags)
        self.tags = resolution.raw_tags
        self.tag_values = resolution.tag_values

        self.info = ScenarioInfo(
            feature_dir=self.env.feature_dir,
            feature_file_name=self.env.feature_file_name,
            scenario_name=scenario.name,
            scenario_type=scenario.keyword,
            scenario_description=scenario.description,
        )

        self.current_step = None
        self.results = []

    def before_step(self, step: 'Step') -> None:
        """Track the step about to be dispatched."""
        self.current_step = step
        logger.debug('%s:%d %s', self.feature_path, step.line, step)

    def after_step(self, result: 'StepResult') -> None:
        """Record a dispatched step result."""
        self.results.append(result)

    def evaluate(self, expression: str,
                 self_value: 'RuntimeValue' = UNSET,
                 root: 'RuntimeValue' = UNSET,
                 parent: 'RuntimeValue' = UNSET) -> 'RuntimeValue':
        """Evaluate an expression against the scenario bindings.

        Raises:
            EvaluationError: If the evaluator fails.
        """
        return self.bindings.evaluate(expression, self_value, root, parent)

    def call(self, feature: 'Feature',
             arguments: dict[str, Any] | None = None) -> VariableStore:
        """Call a feature from a step of this backend.

        Args:
            feature: Parsed feature to call.
            arguments: Caller inputs copied into the called feature.

        Returns:
            Final variables of the called feature.

        Raises:
            CalledUnitError: If any step of the called feature fails.
        """
        from .orchestrator import call_feature  # noqa: PLC0415

        return call_feature(
            feature,
            self.call_context.call(arguments),
            env=self.env,
        )
