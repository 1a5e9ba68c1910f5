"""Embedded expression evaluator.

Expressions are Python expressions compiled once per distinct source
text and evaluated with `eval` against a layered namespace. Builtins are
disabled unless explicitly allowed, so only names provided by the
namespace are visible.

Two evaluator flavours exist:

- `Evaluator` is scenario scoped and evaluates against a namespace
  supplied per call (normally a `ScriptBindings` instance);
- `PureEvaluator` is the single process-wide instance returned by
  `shared_evaluator()`. Its API accepts no namespace at all, so it is
  restricted to binding-free expressions by construction and can be
  used concurrently without locking.

Notes:
    This is not a sandbox. Any callable or object reachable from the
    namespace can be invoked by an expression.
"""

import builtins
from functools import cache, lru_cache
from types import CodeType, MappingProxyType
from typing import TYPE_CHECKING

from loco_bdd.errors import EvaluationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from loco_bdd.values import RuntimeValue

#: Number of distinct compiled expressions kept in memory.
COMPILE_CACHE_SIZE = 2048


@lru_cache(maxsize=COMPILE_CACHE_SIZE)
def compile_expression(expression: str) -> CodeType:
    """Compile expression source text into a code object.

    Args:
        expression: Python expression source.

    Returns:
        Compiled code object in `eval` mode.

    Raises:
        SyntaxError: If the text is not a valid expression.
    """
    return compile(expression.strip(), filename='<expression>', mode='eval')


def _make_globals(allow_builtins: bool) -> dict[str, 'RuntimeValue']:
    """Build the globals mapping for evaluation.

    An empty builtins mapping is used rather than `None`, so a missing
    identifier raises `NameError` as it does in plain Python.
    """
    if allow_builtins:
        return {'__builtins__': MappingProxyType(vars(builtins))}

    return {'__builtins__': {}}


class Evaluator:
    """Scenario-scoped expression evaluator.

    One instance is created per scenario execution and reused for every
    evaluation in that scenario.
    """

    def __init__(self, *, allow_builtins: bool = False) -> None:
        """Initialize an evaluator.

        Args:
            allow_builtins: Whether Python builtins are visible to expressions.
        """
        self.allow_builtins = allow_builtins
        self._globals = _make_globals(allow_builtins)

    def evaluate(self, expression: str,
                 namespace: 'Mapping[str, RuntimeValue]') -> 'RuntimeValue':
        """Evaluate an expression against a namespace.

        Name lookups go to the namespace first; a `KeyError` from the
        namespace makes the name undefined for the evaluator.

        Args:
            expression: Python expression source.
            namespace: Mapping used as the local namespace.

        Returns:
            Result of the evaluated expression.

        Raises:
            EvaluationError: If compilation or evaluation fails.
        """
        try:
            return eval(compile_expression(expression), self._globals, namespace)  # noqa: S307

        except Exception as base:
            raise EvaluationError(expression, base) from base


class PureEvaluator:
    """Process-wide evaluator for binding-free expressions.

    The instance holds no per-call state: every evaluation receives a
    fresh, empty local namespace, so concurrent callers never observe
    each other's names.
    """

    def __init__(self) -> None:
        """Initialize the evaluator with disabled builtins."""
        self._globals = MappingProxyType(_make_globals(allow_builtins=False))

    def evaluate(self, expression: str) -> 'RuntimeValue':
        """Evaluate a binding-free expression.

        Args:
            expression: Python expression source reading no variables.

        Returns:
            Result of the evaluated expression.

        Raises:
            EvaluationError: If compilation or evaluation fails,
                including any attempt to read an undefined name.
        """
        try:
            return eval(compile_expression(expression), dict(self._globals), {})  # noqa: S307

        except Exception as base:
            raise EvaluationError(expression, base) from base


@cache
def shared_evaluator() -> PureEvaluator:
    """Return the lazily created process-wide binding-free evaluator."""
    return PureEvaluator()
