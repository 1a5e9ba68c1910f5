"""Scenario bindings for the expression evaluator.

`ScriptBindings` presents the scenario variable store together with a
small set of injected names to the evaluator, without copying either of
them. It is created once per scenario execution, so the evaluator is
never rebuilt between steps.

Name lookup is layered:

1. the variable store, always first;
2. injected bindings (`loco`, `read`, `_`, `_root`, `_parent`);
3. otherwise the name is undefined and the evaluator applies its own
   semantics for missing identifiers (a `NameError`).

Containment is checked independently on both layers, so an injected
binding holding `None` is still reported as present.
"""

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Any

from loco_bdd.evaluator import shared_evaluator
from loco_bdd.names import BRIDGE_NAME, PARENT_NAME, READ_NAME, ROOT_NAME, SELF_NAME
from loco_bdd.values import RuntimeValue, to_native

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from loco_bdd.context import VariableStore
    from loco_bdd.core.backend import ScenarioBackend
    from loco_bdd.evaluator import Evaluator
    from loco_bdd.schema import Feature, ScenarioInfo

logger = getLogger(__name__)

#: Names that depend on positional evaluation context.
POSITIONAL_NAMES = (SELF_NAME, ROOT_NAME, PARENT_NAME)

#: Default of positional values that were not supplied; `None` is a value.
UNSET: RuntimeValue = object()


class ScriptBridge:
    """Host capabilities exposed to expressions as `loco`."""

    def __init__(self, backend: 'ScenarioBackend') -> None:
        """Initialize the bridge.

        Args:
            backend: Backend of the running scenario or called feature.
        """
        self._backend = backend

    def get(self, name: str, default: RuntimeValue = None) -> RuntimeValue:
        """Return a variable value or a default."""
        return self._backend.vars.get(name, default)

    def set(self, name: str, value: RuntimeValue) -> None:
        """Define or overwrite a variable."""
        self._backend.vars.set(name, value)

    @property
    def tags(self) -> list[str]:
        """Raw tag names of the running scenario."""
        return list(self._backend.tags)

    @property
    def tag_values(self) -> dict[str, list[str]]:
        """Resolved tag values of the running scenario."""
        return {key: list(values) for key, values in self._backend.tag_values.items()}

    @property
    def info(self) -> 'ScenarioInfo | None':
        """Snapshot of the running scenario."""
        return self._backend.info

    def call(self, feature: 'Feature',
             arguments: dict[str, Any] | None = None) -> dict[str, RuntimeValue]:
        """Call a feature and return its final variables."""
        return dict(self._backend.call(feature, arguments))

    def log(self, *values: RuntimeValue) -> None:
        """Log values on behalf of the running scenario."""
        logger.info(' '.join(f'{value}' for value in values))


class ScriptBindings(Mapping[str, RuntimeValue]):
    """Layered namespace over a variable store and injected bindings."""

    def __init__(self, variables: 'VariableStore', evaluator: 'Evaluator', *,
                 bridge: ScriptBridge | None = None,
                 read_function: 'Callable[..., RuntimeValue] | None' = None) -> None:
        """Initialize bindings for one scenario execution.

        Args:
            variables: Variable store of the scenario; kept by reference.
            evaluator: Scenario-scoped evaluator.
            bridge: Host capabilities object injected as `loco`.
            read_function: Optional function injected as `read`.
        """
        self.variables = variables
        self.evaluator = evaluator
        self.bridge = bridge
        self.read_function = read_function

        self.injected: dict[str, RuntimeValue] = {}
        self.refresh()

    def refresh(self, self_value: RuntimeValue = UNSET,
                root: RuntimeValue = UNSET,
                parent: RuntimeValue = UNSET) -> None:
        """Recompute injected bindings.

        Clears injected bindings, re-adds the bridge and the read function
        when configured, then adds each supplied positional value after
        converting it into evaluator-native form.
        A positional value of `None` is supplied; only omitted ones are
        left unbound.

        Args:
            self_value: Current item bound as `_`.
            root: Root value bound as `_root`.
            parent: Parent value bound as `_parent`.
        """
        self.injected.clear()

        if self.bridge is not None:
            self.injected[BRIDGE_NAME] = self.bridge
        if self.read_function is not None:
            self.injected[READ_NAME] = self.read_function

        if self_value is not UNSET:
            self.injected[SELF_NAME] = to_native(self_value)
        if root is not UNSET:
            self.injected[ROOT_NAME] = to_native(root)
        if parent is not UNSET:
            self.injected[PARENT_NAME] = to_native(parent)

    def evaluate(self, expression: str,
                 self_value: RuntimeValue = UNSET,
                 root: RuntimeValue = UNSET,
                 parent: RuntimeValue = UNSET) -> RuntimeValue:
        """Evaluate an expression against these bindings.

        Injected bindings are refreshed when positional values are
        supplied, or when stale positional values from a previous
        evaluation must be cleared.

        Raises:
            EvaluationError: If the evaluator fails.
        """
        positional = any(value is not UNSET for value in (self_value, root, parent))
        if positional or any(name in self.injected for name in POSITIONAL_NAMES):
            self.refresh(self_value, root, parent)

        return self.evaluator.evaluate(expression, self)

    def __getitem__(self, key: str) -> RuntimeValue:
        """Return a variable, converted, or else an injected binding.

        Raises:
            KeyError: If the name is bound in neither layer.
        """
        if key in self.variables:
            return to_native(self.variables[key])

        return self.injected[key]

    def __contains__(self, key: object) -> bool:
        """Return whether either layer binds the name, even to `None`."""
        return key in self.variables or key in self.injected

    def __iter__(self) -> 'Iterator[str]':
        """Iterate variable names, then injected names not shadowed by them."""
        yield from self.variables
        for key in self.injected:
            if key not in self.variables:
                yield key

    def __len__(self) -> int:
        """Return the number of distinct names of both layers."""
        return len(self.keys_union())

    def keys_union(self) -> set[str]:
        """Return names of both layers."""
        return {*self.variables, *self.injected}


def evaluate(expression: str, bindings: ScriptBindings | None = None,
             self_value: RuntimeValue = UNSET,
             root: RuntimeValue = UNSET,
             parent: RuntimeValue = UNSET) -> RuntimeValue:
    """Evaluate an expression with or without scenario bindings.

    Without bindings the shared binding-free evaluator is used and any
    positional values are ignored, since that evaluator never receives a
    namespace.

    Raises:
        EvaluationError: If the evaluator fails.
    """
    if bindings is None:
        return shared_evaluator().evaluate(expression)

    return bindings.evaluate(expression, self_value, root, parent)
