import json
from collections.abc import Mapping
from typing import Any

from converter.core.cipher import FieldCipher
from converter.core.errors import (
    IncompleteRecord,
    MalformedGeometry,
    MalformedJson,
    NoClientElements,
)
from converter.core.geometry import parse_tagged_wkt, to_delimited_ring
from converter.core.xml_tree import classify, node_text, parse_xml_tree_async
from converter.models import CORE_FIELDS, IMPORT_REQUIRED_FIELDS
from converter.shared import Logger

logger = Logger(__name__).get_logger()

__all__ = ["json_to_text", "xml_to_text"]

LINE_SEPARATOR = "\n"
CARD_INDEX = CORE_FIELDS.index("tarjeta")


# ================================================================================
#       JSON
# ================================================================================
def json_to_text(content: str, key: str, delimiter: str) -> str:
    """Turn a ``{"clientes": [...]}`` document back into delimited lines."""
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedJson(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e

    if not isinstance(document, Mapping) or not isinstance(document.get("clientes"), list):
        raise MalformedJson("JSON document must contain a 'clientes' array")

    cipher = FieldCipher(key)
    lines = []
    for index, client in enumerate(document["clientes"], start=1):
        if not isinstance(client, Mapping):
            raise IncompleteRecord(index, list(IMPORT_REQUIRED_FIELDS))

        _require_fields(index, {field: client.get(field) for field in IMPORT_REQUIRED_FIELDS})

        values = [_scalar_text(client.get(field)) for field in CORE_FIELDS]
        values[CARD_INDEX] = cipher.decrypt(values[CARD_INDEX])
        values.append(to_delimited_ring(client.get("poligono")))
        lines.append(delimiter.join(values))

    logger.info("Converted %d JSON clients to text", len(lines))
    return LINE_SEPARATOR.join(lines)


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# ================================================================================
#       XML
# ================================================================================
async def xml_to_text(content: str, key: str, delimiter: str) -> str:
    """Turn a ``<clientes>`` document back into delimited lines."""
    tree = await parse_xml_tree_async(content)

    clientes = tree.get("clientes")
    if not isinstance(clientes, Mapping):
        raise NoClientElements("XML document must contain a 'clientes' element")

    nodes = clientes.get("cliente")
    if nodes is None:
        raise NoClientElements("no 'cliente' elements found in the XML document")
    if not isinstance(nodes, list):
        nodes = [nodes]

    cipher = FieldCipher(key)
    lines = []
    for index, node in enumerate(nodes, start=1):
        if not isinstance(node, Mapping):
            raise IncompleteRecord(index, list(IMPORT_REQUIRED_FIELDS))

        values = [node_text(classify(node.get(field))) for field in CORE_FIELDS]
        _require_fields(
            index,
            {field: value for field, value in zip(CORE_FIELDS, values) if field in IMPORT_REQUIRED_FIELDS},
        )

        values[CARD_INDEX] = cipher.decrypt(values[CARD_INDEX])
        values.append(_polygon_from_xml(node.get("poligono")))
        lines.append(delimiter.join(values))

    logger.info("Converted %d XML clients to text", len(lines))
    return LINE_SEPARATOR.join(lines)


def _polygon_from_xml(node: Any) -> str:
    """Delimited ring for a ``<poligono>`` node, or "" when unreadable."""
    if not node:
        return ""

    if isinstance(node, Mapping):
        nested = next(
            (value for name, value in node.items() if name.lower() == "geojson"), None
        )
        if nested is not None:
            ring = _ring_from_text(node_text(classify(nested)))
            if ring:
                return ring

    return _ring_from_text(node_text(classify(node)))


def _ring_from_text(text: str) -> str:
    text = text.strip()
    if not text:
        return ""

    try:
        return to_delimited_ring(json.loads(text))
    except json.JSONDecodeError:
        pass

    # Documents written by generate_xml carry the tagged POLYGON form
    try:
        return to_delimited_ring(parse_tagged_wkt(text))
    except MalformedGeometry as e:
        logger.debug("Ignoring unreadable polygon: %s", e)
        return ""


# ================================================================================
#       Shared
# ================================================================================
def _require_fields(index: int, values: Mapping[str, Any]) -> None:
    missing = [field for field, value in values.items() if not value]
    if missing:
        raise IncompleteRecord(index, missing)
