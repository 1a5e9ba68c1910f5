"""Engine errors and their formatting.

Every error raised by the engine derives from `EngineError`. An error may
carry an `ErrorContext`; its string form then lists the feature location
of the failure and, when variables are attached, a YAML dump of them:

    expression evaluation failed: total > 0
        in "features/orders.feature", line 12
        on scenario "pay order"
        at step "* assert total > 0"
             ...
            variables:
              total: 0
"""

from os import linesep
from textwrap import indent as indent_lines
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

from loco_bdd.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

#: Placeholder for values that cannot be dumped safely.
FORMAT_REPLACER = '<runtime object>'
#: Placeholder for a missing feature path.
FORMAT_FILENAME = '<unknown feature>'
#: Indentation of location lines; the snippet is indented twice as much.
FORMAT_INDENT = 4

#: Indentation of nested YAML levels in the snippet.
SNIPPET_INDENT = 2


class ErrorContext(TypedDict, total=False):
    """Location and state attached to an error; every key is optional."""

    feature_path: str | None
    scenario_name: str | None
    line_num: int | None
    step_text: str | None

    #: Variables visible when the failure happened.
    variables: dict[str, Any] | None


class ErrorFormatter:
    """Render error messages together with their context."""

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Append the location and variables of a context to a message.

        Args:
            message: Error description.
            context: Optional error context.

        Returns:
            The message as is without context, otherwise the message
            followed by location lines and the variables snippet.
        """
        if not context:
            return message

        location = cls.get_location_string(context, indent=FORMAT_INDENT)
        snippet = cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return f'{message}{linesep}{location}{snippet}'

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: int = 0) -> str:
        """Render the feature path, line, scenario and step, one per line."""
        where = f'in "{context.get('feature_path') or FORMAT_FILENAME}"'
        if context.get('line_num') is not None:
            where += f', line {context['line_num']}'

        lines = [where]
        if scenario_name := context.get('scenario_name'):
            lines.append(f'on scenario "{scenario_name}"')
        if step_text := context.get('step_text'):
            lines.append(f'at step "{step_text}"')

        prefix = ' ' * indent

        return ''.join(f'{prefix}{line}{linesep}' for line in lines)

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: int = 0) -> str:
        """Render visible variables as YAML, or nothing without variables."""
        if not (variables := context.get('variables')):
            return ''

        data = dump(
            {'variables': cls.sanitize(variables)},
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )
        prefix = ' ' * indent

        return f'{prefix} ...{linesep}{indent_lines(data, prefix)}'

    @classmethod
    def sanitize(cls, value: Any) -> Any:  # noqa: ANN401
        """Replace values YAML cannot represent safely with a placeholder.

        Scalars and `None` are kept, containers are walked recursively,
        anything else becomes `FORMAT_REPLACER`.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {f'{key}': cls.sanitize(item) for key, item in value.items()}

        if isinstance(value, SEQUENCES):
            return [cls.sanitize(item) for item in value]

        return FORMAT_REPLACER


class PluginWarning(UserWarning):
    """Warning emitted for non-fatal step plugin issues.

    Used when a plugin cannot be loaded or a step definition is shadowed,
    but the issue does not prevent further execution (relaxed mode).
    """


class EngineError(Exception, ErrorFormatter):
    """Base class of errors raised by the engine."""

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Error description.
            context: Optional location and variables of the failure.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """Return the message followed by its formatted context."""
        return self.format(self.message, self.context)


class PluginError(EngineError):
    """Error raised for fatal step plugin failures in strict mode."""

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a plugin error.

        Args:
            message: Human-readable error description.
            entrypoint: Optional plugin entry point associated with the error.
        """
        self.entrypoint = entrypoint

        super().__init__(message)


class StepDefinitionError(EngineError):
    """Error raised when a step definition cannot be registered."""


class EvaluationError(EngineError):
    """Error raised when an embedded expression fails to evaluate.

    The offending expression text and the original exception are always
    retained; the original exception is also chained as `__cause__`.
    """

    def __init__(self, expression: str, cause: BaseException, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an evaluation error.

        Args:
            expression: Source text of the failed expression.
            cause: Exception raised by the evaluator.
            context: Optional error context.
        """
        self.expression = expression
        self.cause = cause

        super().__init__(
            f'expression evaluation failed: {expression}{linesep}'
            f'{' ' * FORMAT_INDENT}{cause!r}',
            context=context,
        )
        self.__cause__ = cause


class UndefinedStepError(EngineError):
    """No step definition matched a step text.

    Captured in a step result, never raised by the dispatcher.
    """


class AmbiguousStepError(EngineError):
    """More than one step definition matched a step text.

    Captured in a step result, never raised by the dispatcher.
    """

    def __init__(self, message: str, patterns: tuple[str, ...] = ()) -> None:
        """Initialize an ambiguity error.

        Args:
            message: Human-readable error description.
            patterns: Patterns of all conflicting step definitions.
        """
        self.patterns = patterns

        super().__init__(message)


class CalledUnitError(EngineError):
    """Error raised when a called scenario or feature fails.

    The message always names the called feature path, the scenario name
    when it is not blank, and the line of the failing step.
    """

    def __init__(self, message: str, cause: BaseException | None = None, *,  # noqa: PLR0913
                 feature_path: str | None = None,
                 scenario_name: str | None = None,
                 line: int | None = None,
                 context: ErrorContext | None = None) -> None:
        """Initialize a called unit error.

        Args:
            message: Provenance message.
            cause: Error captured from the failing step.
            feature_path: Path of the called feature.
            scenario_name: Name of the failing scenario, if any.
            line: Source line of the failing step.
            context: Optional error context.
        """
        self.cause = cause
        self.feature_path = feature_path
        self.scenario_name = scenario_name
        self.line = line

        super().__init__(message, context=context)
        self.__cause__ = cause
