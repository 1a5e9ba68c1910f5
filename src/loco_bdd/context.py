"""Per-scenario variable store.

The variable store is the ground truth of scenario state. It is created
once per scenario execution, mutated in place by step handlers, and read
by the expression evaluator through `ScriptBindings`.
"""

from typing import TYPE_CHECKING

from loco_bdd.values import RuntimeValue

if TYPE_CHECKING:
    from collections.abc import Mapping


class VariableStore(dict[str, RuntimeValue]):
    """Mapping of variable names to dynamically typed values.

    All mutations are immediately visible to any evaluation bound to the
    same store, since bindings keep a reference rather than a copy.

    A store is owned by one scenario execution and must not be shared
    across worker threads.
    """

    def has(self, name: str) -> bool:
        """Return whether a variable is defined, even if set to `None`."""
        return name in self

    def set(self, name: str, value: RuntimeValue) -> None:
        """Define or overwrite a variable."""
        self[name] = value

    def size(self) -> int:
        """Return the number of defined variables."""
        return len(self)

    def names(self) -> 'set[str]':
        """Return the set of defined variable names."""
        return set(self)

    def merge(self, values: 'Mapping[str, RuntimeValue] | None') -> None:
        """Copy values into the store, overwriting existing names."""
        if values:
            self.update(values)

    def snapshot(self) -> 'VariableStore':
        """Return a shallow copy detached from further mutations."""
        return VariableStore(self)
