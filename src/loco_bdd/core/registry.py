"""Step definition registry and step text matching.

The registry resolves a step text to exactly one step definition.
Matching never raises: undefined and ambiguous outcomes are returned as
data, carrying the error a dispatcher records in the step result.
"""

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import Field

from loco_bdd.errors import AmbiguousStepError, StepDefinitionError, UndefinedStepError
from loco_bdd.extensions import StepDefinition
from loco_bdd.models import SchemaModel

from .loader import StepsLoaderMixin

if TYPE_CHECKING:
    from collections.abc import Callable
    from importlib.metadata import EntryPoint

    from loco_bdd.extensions import StepHandler

logger = getLogger(__name__)


class MatchStatus(StrEnum):
    """Outcome of matching a step text."""

    MATCHED = 'matched'
    UNDEFINED = 'undefined'
    AMBIGUOUS = 'ambiguous'


class StepMatch(SchemaModel):
    """Step definition matched by a step text with its captured groups."""

    definition: StepDefinition
    arguments: tuple[Any, ...] = ()
    keywords: dict[str, Any] = Field(default_factory=dict)

    def invoke(self, backend: Any) -> Any:  # noqa: ANN401
        """Call the step handler with the backend and captured groups."""
        return self.definition.handler(backend, *self.arguments, **self.keywords)


class MatchResult(SchemaModel):
    """Result of matching a step text against the registry."""

    text: str
    status: MatchStatus
    candidates: tuple[StepMatch, ...] = ()
    error: Exception | None = None

    @property
    def selected(self) -> StepMatch | None:
        """Return the candidate chosen for execution.

        For ambiguous matches this is the first candidate in match order.
        """
        if self.candidates:
            return self.candidates[0]

        return None


class StepRegistry(StepsLoaderMixin):
    """Ordered collection of step definitions.

    Definitions are matched in registration order. Registering a pattern
    that already exists shadows the previous definition, which raises in
    strict mode and warns otherwise.
    """

    def __init__(self, *, strict: bool = True, load_plugins: bool = False,
                 builtins: bool = True) -> None:
        """Initialize a registry.

        Args:
            strict: Whether plugin loading issues raise instead of warning.
            load_plugins: Whether to discover entry point step plugins.
            builtins: Whether to register the built-in steps.
        """
        self.strict_mode = strict
        self.definitions: dict[str, StepDefinition] = {}

        if builtins:
            from loco_bdd.builtins import steps  # noqa: PLC0415

            for definition in steps.BUILTIN_STEPS:
                self.add_step(definition)

        if load_plugins:
            self.load_plugins()

    def add_step(self, definition: StepDefinition,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Register a step definition.

        Args:
            definition: Declarative step definition.
            entrypoint: Entry point the definition was loaded from, if any.

        Raises:
            PluginError: If the pattern is already registered on strict mode.
        """
        if definition.pattern in self.definitions and (error := self.emit_plugin_issue(
            f'Step {definition.pattern!r} from {definition.location!r} is shadowing an existing',
            entrypoint,
        )):
            raise error

        self.definitions[definition.pattern] = definition

    def add(self, pattern: str, handler: 'StepHandler') -> StepDefinition:
        """Register a handler for a pattern.

        Raises:
            StepDefinitionError: If the pattern is not a valid expression.
        """
        try:
            definition = StepDefinition(pattern=pattern, handler=handler)
        except ValueError as base:
            raise StepDefinitionError(f'Invalid step definition {pattern!r}') from base

        self.add_step(definition)

        return definition

    def step(self, pattern: str) -> 'Callable[[StepHandler], StepHandler]':
        """Decorator registering a handler for a pattern."""
        def decorator(handler: 'StepHandler') -> 'StepHandler':
            self.add(pattern, handler)
            return handler

        return decorator

    def match(self, text: str) -> MatchResult:
        """Match a step text against all definitions.

        Args:
            text: Step text without the keyword.

        Returns:
            A `MatchResult` with status `matched`, `undefined` or
            `ambiguous`; candidates keep registration order.
        """
        candidates = []
        for definition in self.definitions.values():
            found = definition.regex.fullmatch(text)
            if found is None:
                continue
            if definition.regex.groupindex:
                candidates.append(StepMatch(definition=definition, keywords=found.groupdict()))
            else:
                candidates.append(StepMatch(definition=definition, arguments=found.groups()))

        if not candidates:
            logger.debug('undefined step: %s', text)
            return MatchResult(
                text=text,
                status=MatchStatus.UNDEFINED,
                error=UndefinedStepError(f'syntax error: {text}'),
            )

        if len(candidates) > 1:
            patterns = tuple(candidate.definition.pattern for candidate in candidates)
            logger.debug('ambiguous step: %s matches %s', text, patterns)
            return MatchResult(
                text=text,
                status=MatchStatus.AMBIGUOUS,
                candidates=tuple(candidates),
                error=AmbiguousStepError(
                    f'ambiguous step: {text!r} matches {', '.join(map(repr, patterns))}',
                    patterns,
                ),
            )

        return MatchResult(
            text=text,
            status=MatchStatus.MATCHED,
            candidates=tuple(candidates),
        )
