"""Step dispatch: match, execute, time, classify, notify.

Step-level failures are captured as data in the returned `StepResult`;
nothing raised by a step handler crosses the dispatcher boundary.
"""

from logging import getLogger
from time import perf_counter_ns
from typing import TYPE_CHECKING

from loco_bdd.schema import StepResult, StepStatus

from .registry import MatchStatus

if TYPE_CHECKING:
    from loco_bdd.schema import Step

    from .backend import ScenarioBackend
    from .registry import MatchResult

logger = getLogger(__name__)


def run_step(step: 'Step', backend: 'ScenarioBackend') -> StepResult:
    """Dispatch a single step.

    - Undefined steps are not executed and produce an `undefined` result
      carrying an `UndefinedStepError`.
    - Ambiguous steps select the first candidate, are not executed, and
      produce an `ambiguous` result carrying an `AmbiguousStepError`.
    - Matched steps are executed; the duration is zero when the backend
      runs a nested call, wall time otherwise.

    Every outcome is reported exactly once before it is returned.

    Args:
        step: Step to dispatch.
        backend: Backend of the running scenario.

    Returns:
        The step result.
    """
    backend.before_step(step)

    match = backend.registry.match(step.text)

    if match.status is MatchStatus.UNDEFINED:
        result = StepResult(step=step, status=StepStatus.UNDEFINED, error=match.error)
        return after_step(step, match, result, backend)

    if match.status is MatchStatus.AMBIGUOUS:
        result = StepResult(step=step, status=StepStatus.AMBIGUOUS, error=match.error)
        return after_step(step, match, result, backend)

    status = StepStatus.PASSED
    error: Exception | None = None

    started = perf_counter_ns()
    try:
        match.selected.invoke(backend)  # type: ignore[union-attr]

    except Exception as base:
        error = base
        status = StepStatus.FAILED
        logger.debug('step failed at line %d: %r', step.line, base)

    duration = 0 if backend.is_called else perf_counter_ns() - started

    result = StepResult(step=step, status=status, duration=duration, error=error)
    return after_step(step, match, result, backend)


def after_step(step: 'Step', match: 'MatchResult', result: StepResult,
               backend: 'ScenarioBackend') -> StepResult:
    """Notify the reporter and record the result on the backend."""
    backend.notifier.notify(step, match, result)
    backend.after_step(result)

    return result
