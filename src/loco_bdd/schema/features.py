"""Parsed unit model handed to the engine by an external parser.

A feature is an ordered collection of sections. Each section holds
either a single scenario or a scenario outline already expanded into
concrete scenarios. Every step carries its source line for diagnostics.
"""

from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Literal, Self

from pydantic import Field, model_validator

from loco_bdd.models import DescribedMixin, SchemaModel

if TYPE_CHECKING:
    from collections.abc import Iterator

#: Keyword of a plain scenario.
SCENARIO_KEYWORD = 'Scenario'
#: Keyword of a scenario expanded from an outline.
OUTLINE_KEYWORD = 'Scenario Outline'

type ScenarioKeyword = Literal['Scenario', 'Scenario Outline']


class Tag(SchemaModel):
    """Tag annotation as written in the source, with its line."""

    name: str = Field(
        title='Tag name',
        description='Raw tag name, usually with a leading `@` marker.',
    )

    line: int = Field(
        default=0,
        title='Source line',
        description='Line of the tag annotation in the feature source.',
    )


class Step(SchemaModel):
    """Single step of a scenario."""

    keyword: str = Field(
        default='*',
        title='Step keyword',
        description='Leading keyword such as `Given`, `When`, `Then` or `*`.',
    )

    text: str = Field(
        title='Step text',
        description='Step text without the keyword, matched against step definitions.',
    )

    line: int = Field(
        default=0,
        title='Source line',
        description='Line of the step in the feature source.',
    )

    def __str__(self) -> str:
        """Return the step as written in the source."""
        return f'{self.keyword} {self.text}'


class Scenario(DescribedMixin):
    """Ordered sequence of steps representing a single test case."""

    keyword: ScenarioKeyword = Field(
        default=SCENARIO_KEYWORD,
        title='Scenario keyword',
        description='Distinguishes plain scenarios from outline-derived ones.',
    )

    line: int = Field(
        default=0,
        title='Source line',
    )

    tags: tuple[Tag, ...] = Field(
        default=(),
        title='Tags',
    )

    steps: tuple[Step, ...] = Field(
        default=(),
        title='Steps',
    )


class ScenarioOutline(DescribedMixin):
    """Scenario template already expanded into concrete scenarios."""

    scenarios: tuple[Scenario, ...] = Field(
        default=(),
        title='Expanded scenarios',
        description='Concrete scenarios in example row order.',
    )


class FeatureSection(SchemaModel):
    """Either a single scenario or a scenario outline."""

    scenario: Scenario | None = None
    outline: ScenarioOutline | None = None

    @model_validator(mode='after')
    def check_exclusive(self) -> Self:
        """Ensure exactly one of scenario and outline is set."""
        if (self.scenario is None) == (self.outline is None):
            raise ValueError('section must hold either a scenario or an outline')

        return self

    @property
    def is_outline(self) -> bool:
        """Return whether the section is a scenario outline."""
        return self.outline is not None

    @property
    def scenarios(self) -> tuple[Scenario, ...]:
        """Return the concrete scenarios of this section in order."""
        if self.outline is not None:
            return self.outline.scenarios

        return (self.scenario,)  # type: ignore[return-value]


class Feature(DescribedMixin):
    """Ordered collection of scenarios and outlines sharing context."""

    path: str = Field(
        title='Feature path',
        description='Path of the feature source, used in error provenance.',
    )

    sections: tuple[FeatureSection, ...] = Field(
        default=(),
        title='Sections',
    )

    @property
    def feature_dir(self) -> str:
        """Return the directory part of the feature path."""
        return PurePosixPath(self.path).parent.as_posix()

    @property
    def feature_file_name(self) -> str:
        """Return the file name part of the feature path."""
        return PurePosixPath(self.path).name

    def iter_scenarios(self) -> 'Iterator[Scenario]':
        """Iterate plain and outline-expanded scenarios in declaration order."""
        for section in self.sections:
            yield from section.scenarios
