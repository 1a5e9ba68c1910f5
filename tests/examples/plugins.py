"""Example step plugin definition for loco-bdd.

The example plugin registers a greeting step storing its result in the
scenario variables. It serves as a reference for plugin authors.
"""

from typing import Any

from loco_bdd.extensions import Plugin, StepDefinition


def greet(backend: Any, name: str) -> None:  # noqa: ANN401
    """Store a greeting for a name."""
    backend.vars.set('greeting', f'Hello, {name}!')


example = Plugin(
    name='example',
    steps=[
        StepDefinition(pattern=r'greet (?P<name>\w+)', handler=greet),
    ],
)
