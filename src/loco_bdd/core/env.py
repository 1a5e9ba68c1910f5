"""Script environment shared by the backends of one run."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Self

from pydantic import Field

from loco_bdd.models import SchemaModel
from loco_bdd.reporting import Reporter
from loco_bdd.settings import EngineSettings

from .registry import StepRegistry

if TYPE_CHECKING:
    from loco_bdd.schema import Feature


class ScriptEnv(SchemaModel):
    """Collaborators of a run: settings, steps, reporter, read function.

    Environments are immutable; a called feature gets a copy bound to its
    own feature path.
    """

    settings: EngineSettings = Field(
        default_factory=EngineSettings,
        title='Engine settings',
    )

    registry: StepRegistry = Field(
        default_factory=StepRegistry,
        title='Step registry',
    )

    reporter: Reporter | None = Field(
        default=None,
        title='Reporter',
        description='Step reporter, silent when not set.',
    )

    read_function: Callable[..., Any] | None = Field(
        default=None,
        title='Read function',
        description='Function injected into expressions as `read`.',
    )

    feature_path: str = Field(
        default='',
        title='Feature path',
    )

    feature_dir: str = ''
    feature_file_name: str = ''

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None,
                      **kwargs: Any) -> Self:  # noqa: ANN401
        """Create an environment with a registry configured by settings.

        Args:
            settings: Engine settings, resolved from the environment if omitted.
            **kwargs: Other environment fields.

        Returns:
            A new environment.

        Raises:
            PluginError: If step plugins fail to load on strict mode.
        """
        if settings is None:
            settings = EngineSettings()

        if 'registry' not in kwargs:
            kwargs['registry'] = StepRegistry(
                strict=settings.strict,
                load_plugins=settings.load_plugins,
            )

        return cls(settings=settings, **kwargs)

    def for_feature(self, feature: 'Feature') -> Self:
        """Return a copy of the environment bound to a feature."""
        return self.model_copy(update={
            'feature_path': feature.path,
            'feature_dir': feature.feature_dir,
            'feature_file_name': feature.feature_file_name,
        })
