"""Tests for built-in steps."""

import logging

import pytest

from loco_bdd.core import ScenarioBackend, ScriptEnv, run_step
from loco_bdd.errors import CalledUnitError, EvaluationError
from loco_bdd.schema import Step, StepStatus
from loco_bdd.values import JsonText
from tests.examples.features import make_feature, make_scenario


@pytest.fixture
def backend(env: ScriptEnv) -> ScenarioBackend:
    """Provide a top-level backend with a helper feature in scope."""
    backend = ScenarioBackend(env)
    backend.vars.set('helper', make_feature(
        'features/helper.feature',
        make_scenario('helper', 'def doubled = n * 2'),
    ))
    backend.vars.set('broken', make_feature(
        'features/broken.feature',
        make_scenario('broken', 'assert n < 0', first_line=6),
    ))

    return backend


def run(backend: ScenarioBackend, text: str) -> StepStatus:
    """Run a step text and return its status."""
    return run_step(Step(text=text), backend).status


def test_define(backend: ScenarioBackend) -> None:
    """Define variables visible to later steps."""
    assert run(backend, "def user = {'name': 'Alice', 'roles': ['admin']}") is StepStatus.PASSED
    assert run(backend, "def role = user['roles'][0]") is StepStatus.PASSED

    assert backend.vars['role'] == 'admin'


def test_define_none(backend: ScenarioBackend) -> None:
    """Keep variables defined as `None` present."""
    assert run(backend, 'def nothing = None') is StepStatus.PASSED
    assert run(backend, 'assert nothing is None') is StepStatus.PASSED


def test_define_from_json_text(backend: ScenarioBackend) -> None:
    """Decode JSON text stored by other steps."""
    backend.vars.set('payload', JsonText('{"items": [1, 2, 3]}'))

    assert run(backend, "def count = payload['items'][-1]") is StepStatus.PASSED
    assert backend.vars['count'] == 3


@pytest.mark.parametrize('expression, status', (
    pytest.param('1 == 1', StepStatus.PASSED, id='truthy'),
    pytest.param('[]', StepStatus.FAILED, id='falsy'),
    pytest.param('undefined', StepStatus.FAILED, id='undefined'),
))
def test_assert(backend: ScenarioBackend, expression: str, status: StepStatus) -> None:
    """Fail unless the expression is truthy."""
    assert run(backend, f'assert {expression}') is status


def test_assert_message(backend: ScenarioBackend) -> None:
    """Name the failed expression."""
    result = run_step(Step(text='assert 1 > 2'), backend)

    assert isinstance(result.error, AssertionError)
    assert f'{result.error}' == 'assertion failed: 1 > 2'


def test_match_each(backend: ScenarioBackend) -> None:
    """Bind every item as `_` and the collection as `_root`."""
    backend.vars.set('items', [{'id': 1}, {'id': 2}])

    assert run(backend, "match each items _['id'] <= _root[-1]['id']") is StepStatus.PASSED


def test_match_each_failure_index(backend: ScenarioBackend) -> None:
    """Report the index of the first failing item."""
    backend.vars.set('items', [3, 2, 1])

    result = run_step(Step(text='match each items _ > 1'), backend)

    assert result.status is StepStatus.FAILED
    assert f'{result.error}' == 'match each failed at index 2: _ > 1'


def test_match_each_requires_list(backend: ScenarioBackend) -> None:
    """Reject collections which are not lists."""
    backend.vars.set('items', {'id': 1})

    result = run_step(Step(text='match each items _ > 1'), backend)

    assert isinstance(result.error, TypeError)


def test_match_each_clears_positional_values(backend: ScenarioBackend) -> None:
    """Hide `_` once the iteration is over."""
    backend.vars.set('items', [1])

    assert run(backend, 'match each items _ == 1') is StepStatus.PASSED
    assert run(backend, 'assert _') is StepStatus.FAILED


def test_print(backend: ScenarioBackend, caplog: pytest.LogCaptureFixture) -> None:
    """Log the value of an expression."""
    caplog.set_level(logging.INFO, logger='loco_bdd.builtins.steps')

    assert run(backend, "print {'total': 3}") is StepStatus.PASSED

    assert "{'total': 3}" in caplog.messages


def test_eval_side_effects(backend: ScenarioBackend) -> None:
    """Allow expressions to change variables through the bridge."""
    assert run(backend, "eval loco.set('flag', True)") is StepStatus.PASSED

    assert backend.vars['flag'] is True


def test_call_merges_variables(backend: ScenarioBackend) -> None:
    """Merge the final variables of a called feature into the caller."""
    assert run(backend, "call helper {'n': 21}") is StepStatus.PASSED

    assert backend.vars['doubled'] == 42
    assert backend.vars['n'] == 21


def test_define_call(backend: ScenarioBackend) -> None:
    """Store the final variables of a called feature."""
    assert run(backend, "def result = call helper {'n': 2}") is StepStatus.PASSED

    assert backend.vars['result'] == {'n': 2, 'doubled': 4}
    assert 'doubled' not in backend.vars


def test_call_does_not_share_caller_variables(backend: ScenarioBackend) -> None:
    """Pass only explicit arguments to a called feature."""
    backend.vars.set('n', 5)

    result = run_step(Step(text='call helper'), backend)

    assert result.status is StepStatus.FAILED
    assert isinstance(result.error, CalledUnitError)
    assert isinstance(result.error.cause, EvaluationError)


def test_call_arguments_must_be_mapping(backend: ScenarioBackend) -> None:
    """Reject arguments which are not a mapping."""
    result = run_step(Step(text='call helper [1, 2]'), backend)

    assert isinstance(result.error, TypeError)


def test_called_failure_captured(backend: ScenarioBackend) -> None:
    """Capture a nested failure in the calling step."""
    result = run_step(Step(text="def result = call broken {'n': 1}"), backend)

    assert result.status is StepStatus.FAILED
    assert isinstance(result.error, CalledUnitError)
    assert result.error.message == 'called: features/broken.feature, scenario: broken, line: 6'
    assert 'result' not in backend.vars


def test_match_each_with_none_items(backend: ScenarioBackend) -> None:
    """Bind `None` items as `_` during iteration."""
    backend.vars.set('items', [1, None])

    assert run(backend, 'match each items _ is None or _ > 0') is StepStatus.PASSED
