"""Scenario tag resolution.

Tags are annotations such as `@smoke` or `@env=prod,staging`. Resolution
produces two views of the same tag set:

- raw tag names (marker stripped, duplicates retained, input order) for
  display and filtering;
- a mapping of tag keys to value lists, where a tag written as
  `key=a,b` contributes `['a', 'b']` and a plain tag contributes `[]`.

When the same tag name appears more than once, the occurrence with the
lowest source line wins; ties keep the first one seen.
"""

from typing import TYPE_CHECKING

from pydantic import Field

from loco_bdd.models import SchemaModel
from loco_bdd.names import TAG_MARKER

if TYPE_CHECKING:
    from collections.abc import Iterable

    from loco_bdd.schema import Tag

#: Separator between a tag key and its values.
VALUE_SEPARATOR = '='
#: Separator between tag values.
VALUES_DELIMITER = ','


class TagsResolution(SchemaModel):
    """Resolved tag values and raw tag names."""

    tag_values: dict[str, list[str]] = Field(
        default_factory=dict,
        title='Tag values',
        description='Tag key to ordered values, empty for plain tags.',
    )

    raw_tags: list[str] = Field(
        default_factory=list,
        title='Raw tags',
        description='All tag names without the marker, duplicates included.',
    )


def split_tag_values(name: str) -> tuple[str, list[str]]:
    """Split a tag name into its key and value list.

    Args:
        name: Tag name without the marker.

    Returns:
        Tuple of a key and the comma-separated values. Empty segments are
        kept, so `key=` yields `['']` and `key=a,` yields `['a', '']`.
    """
    key, separator, values = name.partition(VALUE_SEPARATOR)
    if not separator:
        return name, []

    return key, values.split(VALUES_DELIMITER)


def resolve_tags(tags: 'Iterable[Tag]') -> TagsResolution:
    """Resolve tag annotations into values and raw names.

    Args:
        tags: Tag annotations with their source lines.

    Returns:
        A `TagsResolution`; empty input yields empty outputs.
    """
    tag_values: dict[str, list[str]] = {}
    tag_lines: dict[str, int] = {}
    raw_tags: list[str] = []

    for tag in tags:
        name = tag.name.removeprefix(TAG_MARKER)
        raw_tags.append(name)

        key, values = split_tag_values(name)

        previous_line = tag_lines.get(key)
        if previous_line is not None and previous_line <= tag.line:
            continue

        tag_lines[key] = tag.line
        tag_values[key] = values

    return TagsResolution(tag_values=tag_values, raw_tags=raw_tags)
