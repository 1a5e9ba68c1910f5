"""Step plugin discovery.

Step plugins are `Plugin` objects published under the `loco_bdd_steps`
entry point group. A broken plugin is reported as a `PluginWarning` and
skipped, unless the registry runs in strict mode where it raises a
`PluginError` and stops loading.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError

from loco_bdd.errors import PluginError, PluginWarning
from loco_bdd.extensions import Plugin

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

    from loco_bdd.extensions import StepDefinition

#: Entry point group scanned for step plugins.
ENTRYPOINT_GROUP = 'loco_bdd_steps'


class StepsLoaderMixin(ABC):
    """Plugin loading for step registries.

    Subclasses provide `add_step`; the mixin only discovers plugins and
    decides whether an issue warns or raises.

    Attributes:
        strict_mode: Raise `PluginError` on issues instead of warning.
        definitions: Registered step definitions keyed by pattern.
    """

    strict_mode: bool = False

    definitions: dict[str, 'StepDefinition']

    @abstractmethod
    def add_step(self, definition: 'StepDefinition',
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Register a step definition.

        Args:
            definition: Declarative step definition.
            entrypoint: Entry point the definition was loaded from, if any.
        """

    def emit_plugin_issue(self, message: str,
                          entrypoint: 'EntryPoint | None' = None) -> PluginError | None:
        """Report a plugin issue.

        Returns:
            The error to raise on strict mode. Otherwise a `PluginWarning`
            is emitted and `None` is returned.
        """
        if self.strict_mode:
            return PluginError(message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=3)

        return None

    def _resolve_plugin(self, entrypoint: 'EntryPoint') -> Plugin | None:
        """Load the object behind an entry point and check it is a plugin.

        Raises:
            PluginError: On strict mode, if the object cannot be loaded
                or is not a plugin.
        """
        try:
            loaded = entrypoint.load()

        except Exception as base:
            reason = 'validate' if isinstance(base, ValidationError) else 'load'
            error = self.emit_plugin_issue(f'Failed to {reason} entrypoint {entrypoint.name!r}', entrypoint)
            if error is not None:
                raise error from base
            return None

        if isinstance(loaded, Plugin):
            return loaded

        error = self.emit_plugin_issue(
            f'Loaded from entrypoint {entrypoint.name!r} object is not a plugin',
            entrypoint,
        )
        if error is not None:
            raise error

        return None

    def load_plugins(self) -> None:
        """Register the steps of every discovered plugin in discovery order.

        Raises:
            PluginError: On strict mode, for the first plugin issue.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=ENTRYPOINT_GROUP):
            if (plugin := self._resolve_plugin(entrypoint)) is None:
                continue
            for definition in plugin.steps:
                self.add_step(definition, entrypoint)
