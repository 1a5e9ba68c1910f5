"""Runtime settings of the engine.

Settings are resolved from environment variables prefixed with
`LOCO_BDD_`, for example `LOCO_BDD_THREADS=4`.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from loco_bdd.models import SettingsModel


class EngineSettings(SettingsModel):
    """Engine configuration resolved from the environment."""

    model_config = SettingsConfigDict(
        env_prefix='LOCO_BDD_',
        frozen=True,
        extra='ignore',
    )

    strict: bool = Field(
        default=True,
        title='Strict mode',
        description=(
            'Raise on step plugin loading issues and shadowed step '
            'definitions instead of emitting warnings.'
        ),
    )

    allow_builtins: bool = Field(
        default=False,
        title='Allow builtins',
        description=(
            'Expose Python builtins to scenario expressions. '
            'This may reduce safety and reproducibility of features.'
        ),
    )

    threads: int = Field(
        default=1,
        ge=1,
        title='Worker threads',
        description='Number of scenarios executed concurrently by a runner.',
    )

    load_plugins: bool = Field(
        default=True,
        title='Load plugins',
        description='Discover step definitions from the `loco_bdd_steps` entry points.',
    )
