"""Declarative step plugin definition.

A plugin groups step definitions contributed by an extension package.
Plugins are exposed through the `loco_bdd_steps` entry point group and
registered by the step registry during initialization.
"""

from pydantic import Field

from loco_bdd.models import SchemaModel
from loco_bdd.names import VARIABLE_PATTERN

from .steps import StepDefinition, StepHandler

__all__ = (
    'Plugin',
    'StepDefinition',
    'StepHandler',
)


class Plugin(SchemaModel):
    """Declarative container for step definitions."""

    name: str = Field(
        pattern=VARIABLE_PATTERN.pattern,
        title='Plugin namespace',
        description='Logical namespace of the plugin, used for diagnostics.',
    )

    version: int = Field(
        default=1,
        title='Plugin contract version',
    )

    steps: list[StepDefinition] = Field(
        default_factory=list,
        title='Step definitions',
        description='Step definitions registered in declaration order.',
    )
