"""Tests for the engine data model."""

import pytest
from pydantic import ValidationError

from loco_bdd.schema import (
    TOP_LEVEL,
    FeatureSection,
    ScenarioInfo,
    ScenarioOutline,
    ScenarioResult,
    Step,
    StepResult,
    StepStatus,
)
from tests.examples.features import make_feature, make_scenario


def test_section_requires_one_item() -> None:
    """Hold exactly one of a scenario and an outline."""
    with pytest.raises(ValidationError):
        FeatureSection()

    with pytest.raises(ValidationError):
        FeatureSection(scenario=make_scenario('one'), outline=ScenarioOutline())


def test_feature_scenarios_in_order() -> None:
    """Iterate plain and expanded scenarios in declaration order."""
    feature = make_feature(
        'features/nested/orders.feature',
        make_scenario('first'),
        ScenarioOutline(scenarios=(make_scenario('row 1'), make_scenario('row 2'))),
        make_scenario('last'),
    )

    assert [scenario.name for scenario in feature.iter_scenarios()] == [
        'first', 'row 1', 'row 2', 'last',
    ]
    assert feature.feature_dir == 'features/nested'
    assert feature.feature_file_name == 'orders.feature'


def test_step_as_written() -> None:
    """Render the step keyword and text."""
    assert f'{Step(keyword="Given", text="a user")}' == 'Given a user'


def test_call_context_nesting() -> None:
    """Increase depth and copy arguments for nested calls."""
    arguments = {'n': 1}
    context = TOP_LEVEL.call(arguments).call()

    assert not TOP_LEVEL.is_called
    assert context.is_called
    assert context.depth == 2
    assert context.parent.arguments == arguments
    assert context.parent.arguments is not arguments
    assert context.arguments == {}


def test_scenario_result_summary() -> None:
    """Summarize the first failing step of a scenario."""
    error = AssertionError('boom')
    result = ScenarioResult(info=ScenarioInfo(), results=(
        StepResult(step=Step(text='one'), status=StepStatus.PASSED, duration=5),
        StepResult(step=Step(text='two'), status=StepStatus.FAILED, duration=7, error=error),
    ))

    assert not result.is_pass
    assert result.status is StepStatus.FAILED
    assert result.error is error
    assert result.failed_step.step.text == 'two'
    assert result.duration == 12


def test_empty_scenario_result_passes() -> None:
    """Treat a scenario without steps as passed."""
    result = ScenarioResult(info=ScenarioInfo())

    assert result.is_pass
    assert result.status is StepStatus.PASSED
    assert result.error is None
