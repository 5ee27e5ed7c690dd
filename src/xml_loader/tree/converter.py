"""Conversion of lxml trees to plain Python data.

Conversion runs in two phases. ``encode_tree`` serializes the tree to JSON
text and ``decode_structure`` loads that text as dicts or records. Encoding
rules:

- the root element's content is the top-level object
- child elements become keys, repeated siblings collect into a list
- an element without children becomes its text, or ``{}`` when it has none;
  text split by comments, processing instructions or entity references is
  joined, with internal entities replaced by their declared value
- attributes are stored under ``"@attributes"``; an attributed element
  without children keeps its text under ``"0"``
- comments and processing instructions are skipped
"""

import json
from types import SimpleNamespace
from typing import Any, Dict, Union

from lxml import etree

from xml_loader.shared import ConversionError

ATTRIBUTES_KEY = "@attributes"
TEXT_KEY = "0"

TreeHandle = Union["etree._Element", "etree._ElementTree"]


def _local_name(element: "etree._Element") -> str:
    return etree.QName(element).localname


def _declared_entities(element: "etree._Element") -> Dict[str, str]:
    dtd = element.getroottree().docinfo.internalDTD
    if dtd is None:
        return {}
    return {
        entity.name: entity.content
        for entity in dtd.iterentities()
        if entity.content is not None
    }


def _text_content(element: "etree._Element", entities: Dict[str, str]) -> str:
    parts = [element.text or ""]
    for child in element:
        if isinstance(child, etree._Entity):
            parts.append(entities.get(child.name, child.text))
        parts.append(child.tail or "")
    return "".join(parts)


def _element_to_value(
    element: "etree._Element", entities: Dict[str, str]
) -> Union[str, Dict[str, Any]]:
    children = [child for child in element if isinstance(child.tag, str)]
    attributes = {_attribute_name(key): value for key, value in element.attrib.items()}

    if not children:
        text = _text_content(element, entities)
        if attributes:
            value: Dict[str, Any] = {ATTRIBUTES_KEY: attributes}
            if text:
                value[TEXT_KEY] = text
            return value
        return text if text else {}

    value = {}
    if attributes:
        value[ATTRIBUTES_KEY] = attributes
    repeated = set()
    for child in children:
        name = _local_name(child)
        child_value = _element_to_value(child, entities)
        if name not in value:
            value[name] = child_value
        elif name in repeated:
            value[name].append(child_value)
        else:
            value[name] = [value[name], child_value]
            repeated.add(name)
    return value


def _attribute_name(key: str) -> str:
    if key.startswith("{"):
        return etree.QName(key).localname
    return key


def encode_tree(tree: TreeHandle, target: str = "mapping") -> str:
    """Serialize a tree to its intermediate JSON form.

    Raises:
        ConversionError: The tree holds data JSON cannot represent
    """
    if isinstance(tree, etree._ElementTree):
        tree = tree.getroot()
    try:
        value = _element_to_value(tree, _declared_entities(tree))
        if isinstance(value, str):
            value = {TEXT_KEY: value}
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ConversionError(target, str(e)) from e


def decode_structure(text: str, as_record: bool = False) -> Any:
    """Load intermediate JSON as nested dicts or ``SimpleNamespace`` records.

    Raises:
        ConversionError: The text is not valid JSON
    """
    target = "record" if as_record else "mapping"
    try:
        if as_record:
            return json.loads(text, object_hook=lambda pairs: SimpleNamespace(**pairs))
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise ConversionError(target, str(e)) from e
