"""Step reporting interface.

The dispatcher notifies a reporter after every step. Two capabilities
are supported:

- rich reporters receive the step, its match, the result, and the call
  context in a single `on_step` notification;
- pass-through reporters mirror the minimal external reporting protocol
  and receive `on_match` followed by `on_result`.

The capability check is resolved once per execution by
`select_notifier`, not per step. Nested calls under a pass-through
reporter are silent, so they never re-emit top-level shaped events.
"""

from abc import ABC, abstractmethod
from threading import Lock
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from loco_bdd.core.registry import MatchResult
    from loco_bdd.schema import CallContext, Step, StepResult


class Reporter(ABC):
    """Base class of all reporters."""


class RichReporter(Reporter):
    """Reporter receiving complete step notifications."""

    @abstractmethod
    def on_step(self, step: 'Step', match: 'MatchResult',
                result: 'StepResult', call_context: 'CallContext') -> None:
        """Receive a dispatched step outcome.

        Args:
            step: Dispatched step.
            match: Match information for the step text.
            result: Outcome of the step.
            call_context: Context of the execution the step belongs to.
        """


class PassThroughReporter(Reporter):
    """Reporter receiving separate match and result events."""

    def on_match(self, match: 'MatchResult') -> None:  # noqa: B027
        """Receive match information for a step."""

    def on_result(self, result: 'StepResult') -> None:  # noqa: B027
        """Receive the outcome of a step."""


class NoopReporter(PassThroughReporter):
    """Silent default reporter."""


class ReportedStep(NamedTuple):
    """Notification recorded by `RecordingReporter`."""

    step: 'Step'
    match: 'MatchResult'
    result: 'StepResult'
    call_context: 'CallContext'


class RecordingReporter(RichReporter):
    """Rich reporter collecting every notification in memory.

    Safe to share between worker threads.
    """

    def __init__(self) -> None:
        """Initialize an empty recording."""
        self.steps: list[ReportedStep] = []
        self._lock = Lock()

    def on_step(self, step: 'Step', match: 'MatchResult',
                result: 'StepResult', call_context: 'CallContext') -> None:
        """Record a dispatched step outcome."""
        with self._lock:
            self.steps.append(ReportedStep(step, match, result, call_context))


class StepNotifier:
    """Notification sink bound to one execution."""

    def notify(self, step: 'Step', match: 'MatchResult',
               result: 'StepResult') -> None:
        """Forward a step outcome; the base sink drops it."""


class RichNotifier(StepNotifier):
    """Forward every notification to a rich reporter."""

    def __init__(self, reporter: RichReporter, call_context: 'CallContext') -> None:
        """Initialize a notifier.

        Args:
            reporter: Rich reporter receiving notifications.
            call_context: Context passed along with every notification.
        """
        self.reporter = reporter
        self.call_context = call_context

    def notify(self, step: 'Step', match: 'MatchResult',
               result: 'StepResult') -> None:
        """Send a single `on_step` notification."""
        self.reporter.on_step(step, match, result, self.call_context)


class PassThroughNotifier(StepNotifier):
    """Forward match and result events to a pass-through reporter."""

    def __init__(self, reporter: PassThroughReporter) -> None:
        """Initialize a notifier.

        Args:
            reporter: Pass-through reporter receiving events.
        """
        self.reporter = reporter

    def notify(self, step: 'Step', match: 'MatchResult',
               result: 'StepResult') -> None:
        """Send `on_match` followed by `on_result`."""
        self.reporter.on_match(match)
        self.reporter.on_result(result)


#: Sink used for silent executions.
SILENT = StepNotifier()


def select_notifier(reporter: Reporter | None,
                    call_context: 'CallContext') -> StepNotifier:
    """Select the notification sink of an execution.

    Args:
        reporter: Configured reporter, `None` for the silent default.
        call_context: Context of the execution.

    Returns:
        A rich notifier for rich reporters, a pass-through notifier for
        top-level executions, otherwise the silent sink.
    """
    if isinstance(reporter, RichReporter):
        return RichNotifier(reporter, call_context)

    if isinstance(reporter, PassThroughReporter) and not call_context.is_called:
        return PassThroughNotifier(reporter)

    return SILENT
