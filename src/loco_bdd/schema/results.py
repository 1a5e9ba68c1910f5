"""Execution results and scenario snapshots."""

from enum import StrEnum

from pydantic import Field

from loco_bdd.models import SchemaModel

from .features import SCENARIO_KEYWORD, ScenarioKeyword, Step


class StepStatus(StrEnum):
    """Outcome of a single step."""

    PASSED = 'passed'
    FAILED = 'failed'
    UNDEFINED = 'undefined'
    AMBIGUOUS = 'ambiguous'
    SKIPPED = 'skipped'


class ScenarioInfo(SchemaModel):
    """Immutable snapshot describing the running scenario.

    Created once per scenario before any step executes.
    """

    feature_dir: str = ''
    feature_file_name: str = ''
    scenario_name: str = ''
    scenario_type: ScenarioKeyword = SCENARIO_KEYWORD
    scenario_description: str | None = None


class StepResult(SchemaModel):
    """Outcome of a dispatched step."""

    step: Step
    status: StepStatus

    duration: int = Field(
        default=0,
        ge=0,
        title='Duration',
        description='Elapsed time in nanoseconds, zero for nested calls.',
    )

    error: BaseException | None = None

    @property
    def is_pass(self) -> bool:
        """Return whether the step passed."""
        return self.status is StepStatus.PASSED


class ScenarioResult(SchemaModel):
    """Results of a top-level scenario run, possibly partial."""

    info: ScenarioInfo
    results: tuple[StepResult, ...] = ()

    @property
    def failed_step(self) -> StepResult | None:
        """Return the first non-passing step result, if any."""
        for result in self.results:
            if not result.is_pass:
                return result

        return None

    @property
    def status(self) -> StepStatus:
        """Return the status of the failing step or `passed`."""
        if failed := self.failed_step:
            return failed.status

        return StepStatus.PASSED

    @property
    def is_pass(self) -> bool:
        """Return whether every step passed."""
        return self.failed_step is None

    @property
    def error(self) -> BaseException | None:
        """Return the error of the failing step, if any."""
        if failed := self.failed_step:
            return failed.error

        return None

    @property
    def duration(self) -> int:
        """Return the summed duration of all step results."""
        return sum(result.duration for result in self.results)


class FeatureResult(SchemaModel):
    """Results of a top-level feature run."""

    path: str
    scenarios: tuple[ScenarioResult, ...] = ()
    variables: dict[str, object] = Field(default_factory=dict)

    @property
    def is_pass(self) -> bool:
        """Return whether every scenario passed."""
        return all(scenario.is_pass for scenario in self.scenarios)
