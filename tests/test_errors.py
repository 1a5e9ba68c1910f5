"""Tests for error formatting."""

from os import linesep

from loco_bdd.errors import (
    FORMAT_REPLACER,
    CalledUnitError,
    EngineError,
    ErrorContext,
    ErrorFormatter,
    EvaluationError,
)


def test_format_without_context() -> None:
    """Return the plain message without context."""
    assert ErrorFormatter.format('Failure') == 'Failure'
    assert str(EngineError('Failure')) == 'Failure'


def test_format_location() -> None:
    """Render feature, line, scenario and step location."""
    message = ErrorFormatter.format('Failure', ErrorContext(
        feature_path='features/users.feature',
        scenario_name='create user',
        line_num=12,
        step_text='* assert status == 201',
    ))

    lines = message.split(linesep)
    assert lines[0] == 'Failure'
    assert lines[1] == '    in "features/users.feature", line 12'
    assert lines[2] == '    on scenario "create user"'
    assert lines[3] == '    at step "* assert status == 201"'


def test_format_unknown_feature() -> None:
    """Render a placeholder for a missing feature path."""
    message = ErrorFormatter.format('Failure', ErrorContext(line_num=1))

    assert '<unknown feature>' in message


def test_format_variables_snippet_masks_objects() -> None:
    """Render variables as YAML and mask opaque objects."""
    message = ErrorFormatter.format('Failure', ErrorContext(
        feature_path='a.feature',
        variables={'user': {'name': 'Alice'}, 'client': object()},
    ))

    assert 'name: Alice' in message
    assert f'client: {FORMAT_REPLACER}' in message


def test_evaluation_error_keeps_cause() -> None:
    """Retain the expression text and the original exception."""
    cause = ZeroDivisionError('division by zero')
    error = EvaluationError('1 / 0', cause)

    assert error.expression == '1 / 0'
    assert error.cause is cause
    assert error.__cause__ is cause
    assert error.message.startswith('expression evaluation failed: 1 / 0')


def test_called_unit_error_keeps_provenance() -> None:
    """Retain provenance fields and the wrapped cause."""
    cause = AssertionError('boom')
    error = CalledUnitError('called: a.feature, line: 3', cause,
                            feature_path='a.feature', line=3)

    assert error.cause is cause
    assert error.__cause__ is cause
    assert error.feature_path == 'a.feature'
    assert error.scenario_name is None
    assert error.line == 3
