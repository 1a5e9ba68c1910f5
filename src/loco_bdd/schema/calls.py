"""Call context of an execution.

A call context tells whether the current execution is itself a nested
call and carries the inputs supplied by the caller.
"""

from typing import Any

from pydantic import Field

from loco_bdd.models import SchemaModel


class CallContext(SchemaModel):
    """Identifies a top-level or nested execution."""

    parent: 'CallContext | None' = Field(
        default=None,
        title='Caller context',
    )

    depth: int = Field(
        default=0,
        ge=0,
        title='Call depth',
        description='Zero for top-level executions.',
    )

    arguments: dict[str, Any] = Field(
        default_factory=dict,
        title='Caller inputs',
        description='Values copied into the called unit variables before it runs.',
    )

    @property
    def is_called(self) -> bool:
        """Return whether this execution is a nested call."""
        return self.depth > 0

    def call(self, arguments: dict[str, Any] | None = None) -> 'CallContext':
        """Create the context of a unit called from this execution."""
        return CallContext(
            parent=self,
            depth=self.depth + 1,
            arguments=dict(arguments or {}),
        )


#: Context of a top-level execution.
TOP_LEVEL = CallContext()
