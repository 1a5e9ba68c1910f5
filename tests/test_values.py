"""Tests for evaluator-native value conversion."""

from xml.etree.ElementTree import ElementTree, fromstring

import pytest
from pydantic import BaseModel

from loco_bdd.schema import Feature
from loco_bdd.values import JsonText, to_native, xml_to_native


def test_xml_element_conversion() -> None:
    """Convert XML markup into nested mappings."""
    element = fromstring('<root><a>1</a><a>2</a><b x="y">t</b><c/></root>')

    assert xml_to_native(element) == {
        'root': {
            'a': ['1', '2'],
            'b': {'@x': 'y', '_': 't'},
            'c': None,
        },
    }


def test_xml_tree_conversion() -> None:
    """Convert an element tree using its root element."""
    tree = ElementTree(fromstring('<user><name>Alice</name></user>'))

    assert to_native(tree) == {'user': {'name': 'Alice'}}


def test_json_text_conversion() -> None:
    """Decode JSON text marked as such."""
    assert to_native(JsonText('{"items": [1, 2]}')) == {'items': [1, 2]}


def test_plain_string_is_unchanged() -> None:
    """Leave ordinary strings as they are."""
    assert to_native('{"items": [1, 2]}') == '{"items": [1, 2]}'


def test_pydantic_model_conversion() -> None:
    """Dump Pydantic models into mappings."""
    class User(BaseModel):
        name: str
        roles: list[str]

    assert to_native(User(name='Alice', roles=['admin'])) == {'name': 'Alice', 'roles': ['admin']}


@pytest.mark.parametrize('value', (
    pytest.param(42, id='int'),
    pytest.param(None, id='none'),
    pytest.param([1, 2], id='list'),
    pytest.param(object, id='opaque'),
))
def test_other_values_pass_through(value: object) -> None:
    """Return other values unchanged."""
    assert to_native(value) is value


def test_engine_models_stay_opaque() -> None:
    """Keep parsed features usable as call targets."""
    feature = Feature(path='features/a.feature')

    assert to_native(feature) is feature
