"""Core value definitions for the engine runtime.

This module defines the value types stored in a scenario variable store
and the conversion applied before a value is handed to the expression
evaluator. Structured values (JSON text, XML markup, Pydantic models) are
converted into plain Python containers so expressions can navigate them
with ordinary attribute-free subscripting.
"""

from datetime import date, datetime, timedelta
from json import loads
from typing import Any
from xml.etree.ElementTree import Element, ElementTree

from pydantic import BaseModel, SecretStr

from loco_bdd.models import SchemaModel

#: Scalars represent fully resolved, atomic values.
type Scalar = date | datetime | timedelta | str | bytes | int | float | bool | SecretStr

#: A value is considered native if it contains only scalars and
#: plain containers and can be consumed directly by expressions.
type Value = Scalar | list['Value'] | dict[str, 'Value'] | None

#: A value in runtime represents any Python object stored by step
#: handlers: primitives, structured values, markup, or opaque objects.
type RuntimeValue = Any

MAPPINGS = (dict,)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool, SecretStr)
SEQUENCES = (list, tuple, set)

#: Key used for element attributes in converted markup.
XML_ATTRIBUTE_PREFIX = '@'
#: Key used for element text when it sits next to children or attributes.
XML_TEXT_KEY = '_'


class JsonText(str):
    """String holding JSON text that is decoded on evaluation."""

    __slots__ = ()


def _element_value(element: Element) -> RuntimeValue:
    """Convert a single XML element body into native containers.

    Elements without children and attributes collapse to their text.
    Repeated child tags are collected into lists in document order.

    Args:
        element: XML element to convert.

    Returns:
        Element text or a mapping of attributes and children.
    """
    children = list(element)
    if not children and not element.attrib:
        return element.text

    value: dict[str, RuntimeValue] = {
        f'{XML_ATTRIBUTE_PREFIX}{key}': item
        for key, item in element.attrib.items()
    }

    text = (element.text or '').strip()
    if text:
        value[XML_TEXT_KEY] = text

    repeated: set[str] = set()
    for child in children:
        item = _element_value(child)
        if child.tag not in value:
            value[child.tag] = item
        elif child.tag in repeated:
            value[child.tag].append(item)
        else:
            value[child.tag] = [value[child.tag], item]
            repeated.add(child.tag)

    return value


def xml_to_native(value: Element | ElementTree) -> dict[str, RuntimeValue]:
    """Convert XML markup into a mapping keyed by the root tag.

    Args:
        value: XML element or element tree.

    Returns:
        Mapping with a single root tag key.
    """
    root = value.getroot() if isinstance(value, ElementTree) else value

    return {root.tag: _element_value(root)}


def to_native(value: RuntimeValue) -> RuntimeValue:
    """Convert a structured value into an evaluator-native form.

    Conversion is shallow with respect to opaque objects: values that are
    neither JSON text, XML markup, nor user Pydantic models are returned
    as is, so handlers may store arbitrary Python objects and call them
    from expressions. Engine models such as parsed features stay opaque.

    Args:
        value: Value taken from a variable store or an injected binding.

    Returns:
        Native representation of the value.

    Raises:
        ValueError: If JSON text cannot be decoded.
    """
    if isinstance(value, JsonText):
        return loads(value)

    if isinstance(value, (Element, ElementTree)):
        return xml_to_native(value)

    if isinstance(value, BaseModel) and not isinstance(value, SchemaModel):
        return value.model_dump()

    return value
