"""Declarative step definitions.

A step definition binds a regular expression to a handler callable. The
expression must match the whole step text (keyword excluded). Captured
groups are passed to the handler after the scenario backend:

- positional groups as positional arguments, when the pattern has no
  named groups;
- named groups as keyword arguments otherwise.
"""

from collections.abc import Callable
from functools import cached_property
from re import Pattern, error
from re import compile as regexp
from typing import Any

from pydantic import Field, field_validator

from loco_bdd.models import SchemaModel

#: The handler receives the scenario backend followed by captured groups.
#: Any raised exception fails the step.
type StepHandler = Callable[..., Any]


class StepDefinition(SchemaModel):
    """Declarative binding of a step text pattern to a handler."""

    pattern: str = Field(
        title='Step pattern',
        description='Regular expression matched against the full step text.',
    )

    handler: StepHandler = Field(
        title='Step handler',
        description='Callable executing the step.',
    )

    @field_validator('pattern')
    @classmethod
    def check_pattern(cls, value: str) -> str:
        """Ensure the pattern is a valid regular expression."""
        try:
            regexp(value)
        except error as base:
            raise ValueError(f'invalid step pattern {value!r}: {base}') from base

        return value

    @cached_property
    def regex(self) -> Pattern[str]:
        """Return the compiled pattern."""
        return regexp(self.pattern)

    @property
    def location(self) -> str:
        """Return a printable location of the handler."""
        module = getattr(self.handler, '__module__', None) or '<unknown>'
        qualname = getattr(self.handler, '__qualname__', None) or repr(self.handler)

        return f'{module}.{qualname}'
