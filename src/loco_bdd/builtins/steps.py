"""Built-in step definitions.

Each step evaluates expressions against the scenario bindings, so
variables defined by earlier steps are visible to later ones:

- `def <name> = <expression>` defines a variable;
- `def <name> = call <feature> [<arguments>]` stores called feature variables;
- `call <feature> [<arguments>]` merges called feature variables into the caller;
- `assert <expression>` fails unless the expression is truthy;
- `match each <collection> <predicate>` evaluates a predicate per item,
  with the item bound as `_` and the collection as `_root` and `_parent`;
- `print <expression>` logs a value;
- `eval <expression>` evaluates an expression for its side effects.
"""

from logging import getLogger
from typing import TYPE_CHECKING, Any

from loco_bdd.extensions import StepDefinition
from loco_bdd.names import NAME_PATTERN

if TYPE_CHECKING:
    from loco_bdd.core.backend import ScenarioBackend

logger = getLogger(__name__)


def _call(backend: 'ScenarioBackend', feature: str,
          arguments: str | None) -> dict[str, Any]:
    """Resolve and call a feature with optional arguments."""
    target = backend.evaluate(feature)

    values = None
    if arguments:
        values = backend.evaluate(arguments)
        if not isinstance(values, dict):
            raise TypeError(f'call arguments must be a mapping, got {type(values).__name__}')

    return dict(backend.call(target, values))


def define(backend: 'ScenarioBackend', name: str, expression: str) -> None:
    """Define a variable from an expression."""
    backend.vars.set(name, backend.evaluate(expression))


def define_call(backend: 'ScenarioBackend', name: str, feature: str,
                arguments: str | None = None) -> None:
    """Define a variable holding the final variables of a called feature."""
    backend.vars.set(name, _call(backend, feature, arguments))


def call(backend: 'ScenarioBackend', feature: str,
         arguments: str | None = None) -> None:
    """Call a feature and merge its final variables into the caller."""
    backend.vars.merge(_call(backend, feature, arguments))


def assert_(backend: 'ScenarioBackend', expression: str) -> None:
    """Fail unless the expression evaluates to a truthy value."""
    if not backend.evaluate(expression):
        raise AssertionError(f'assertion failed: {expression}')


def match_each(backend: 'ScenarioBackend', collection: str, predicate: str) -> None:
    """Fail unless the predicate holds for every item of a collection."""
    items = backend.evaluate(collection)
    if not isinstance(items, (list, tuple)):
        raise TypeError(f'match each expects a list, got {type(items).__name__}')

    for index, item in enumerate(items):
        if not backend.evaluate(predicate, self_value=item, root=items, parent=items):
            raise AssertionError(f'match each failed at index {index}: {predicate}')


def print_(backend: 'ScenarioBackend', expression: str) -> None:
    """Log the value of an expression."""
    logger.info('%s', backend.evaluate(expression))


def eval_(backend: 'ScenarioBackend', expression: str) -> None:
    """Evaluate an expression and discard the value."""
    backend.evaluate(expression)


#: Name of a variable defined by a step.
_NAME = rf'(?P<name>{NAME_PATTERN})'
#: Feature reference and optional arguments of a call.
_CALL = r'call (?P<feature>\S+)(?: (?P<arguments>.+))?'

BUILTIN_STEPS = (
    StepDefinition(pattern=rf'def {_NAME} = {_CALL}', handler=define_call),
    StepDefinition(pattern=rf'def {_NAME} = (?!call )(?P<expression>.+)', handler=define),
    StepDefinition(pattern=_CALL, handler=call),
    StepDefinition(pattern=r'assert (?P<expression>.+)', handler=assert_),
    StepDefinition(pattern=r'match each (?P<collection>\S+) (?P<predicate>.+)', handler=match_each),
    StepDefinition(pattern=r'print (?P<expression>.+)', handler=print_),
    StepDefinition(pattern=r'eval (?P<expression>.+)', handler=eval_),
)
