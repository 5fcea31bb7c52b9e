"""Thin XML layer over ``xml.etree.ElementTree``.

Writing: build a tree of named text elements and pretty-print it.

Reading: turn a document into nested dicts the way xml2js does with
``explicitArray=false, mergeAttrs=true, normalizeTags=true, trim=true``:

* an element with neither children nor attributes becomes its text,
* otherwise a dict keyed by lowercased child tag, attributes merged in and
  any text kept under ``"_"``,
* repeated children collapse into a list, a single child stays a value.

Text of such nodes can arrive in several shapes, see :func:`classify`.
"""

import asyncio
import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any
from xml.dom import minidom

from converter.core.errors import MalformedXml

__all__ = [
    "TEXT_KEYS",
    "NodeContent",
    "OpaqueNode",
    "PlainText",
    "WrappedText",
    "add_text_element",
    "classify",
    "node_text",
    "parse_xml_tree",
    "parse_xml_tree_async",
    "to_pretty_xml",
]

TEXT_KEY = "_"
TEXT_KEYS = (TEXT_KEY, "#text")

type XmlNode = str | dict[str, Any] | list[Any]


# ================================================================================
#       Writing
# ================================================================================
def add_text_element(parent: ET.Element, tag: str, text: str) -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = text
    return element


def to_pretty_xml(root: ET.Element) -> str:
    # Entity escaping happens here, values must be handed over unescaped
    rough = ET.tostring(root, encoding="unicode")
    pretty = minidom.parseString(rough).toprettyxml(indent="  ", encoding="UTF-8")
    return pretty.decode("utf-8")


# ================================================================================
#       Reading
# ================================================================================
def parse_xml_tree(content: str) -> dict[str, XmlNode]:
    if not content or not content.strip():
        raise MalformedXml("XML content must not be empty")

    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise MalformedXml(f"error parsing XML: {e}") from e

    return {_normalize_tag(root.tag): _element_to_node(root)}


async def parse_xml_tree_async(content: str) -> dict[str, XmlNode]:
    """Parse off the event loop; the tree is complete when this returns."""
    return await asyncio.to_thread(parse_xml_tree, content)


def _normalize_tag(tag: str) -> str:
    # "{namespace}tag" -> "tag"
    if tag.startswith("{"):
        tag = tag.split("}", 1)[1]
    return tag.lower()


def _normalize_text(element: ET.Element) -> str:
    pieces = [element.text or ""]
    pieces.extend(child.tail or "" for child in element)
    return "".join(pieces).strip()


def _element_to_node(element: ET.Element) -> XmlNode:
    text = _normalize_text(element)
    children = list(element)

    if not children and not element.attrib:
        return text

    node: dict[str, Any] = {}
    for name, value in element.attrib.items():
        _add_value(node, _normalize_tag(name), value)
    for child in children:
        _add_value(node, _normalize_tag(child.tag), _element_to_node(child))
    if text:
        node[TEXT_KEY] = text

    return node


def _add_value(node: dict[str, Any], key: str, value: XmlNode):
    if key not in node:
        node[key] = value
    elif isinstance(node[key], list):
        node[key].append(value)
    else:
        node[key] = [node[key], value]


# ================================================================================
#       Node content
# ================================================================================
@dataclass(frozen=True)
class PlainText:
    value: str


@dataclass(frozen=True)
class WrappedText:
    """Text stored under a conventional key of an element node."""

    value: str


@dataclass(frozen=True)
class OpaqueNode:
    value: dict[str, Any] | list[Any]


type NodeContent = PlainText | WrappedText | OpaqueNode


def classify(node: XmlNode | None) -> NodeContent:
    if node is None:
        return PlainText("")
    if isinstance(node, str):
        return PlainText(node)
    if isinstance(node, dict):
        for key in TEXT_KEYS:
            if isinstance(node.get(key), str):
                return WrappedText(node[key])
        return OpaqueNode(node)
    if isinstance(node, list):
        return OpaqueNode(node)
    return PlainText(str(node))


def node_text(content: NodeContent) -> str:
    """Best text representation of ``content``; never fails."""
    match content:
        case PlainText(value) | WrappedText(value):
            return value
        case OpaqueNode(value):
            items = value.values() if isinstance(value, dict) else value
            for item in items:
                if isinstance(item, str):
                    return item
            return json.dumps(value, ensure_ascii=False)
