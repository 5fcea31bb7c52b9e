"""Polygon encodings used by the three record formats.

* delimited text: ``((lon lat, lon lat, ...))``
* JSON: GeoJSON ``Polygon`` objects, with a derived ``bbox``
* XML: the tagged form ``POLYGON ((lon lat, ...))``

Parsing functions raise; the two formatters never do and return an empty
string when there is nothing sensible to render.
"""

import json
import math
import re
from collections.abc import Mapping

from pydantic import ValidationError as ModelValidationError

from converter.core.errors import InvalidGeometry, MalformedGeometry
from converter.models import BoundingBox, LinearRing, Polygon
from converter.shared import Logger

logger = Logger(__name__).get_logger()

__all__ = [
    "MIN_RING_POINTS",
    "bounding_box",
    "close_ring",
    "parse_delimited_ring",
    "parse_tagged_wkt",
    "to_delimited_ring",
    "to_geojson",
    "to_tagged_wkt",
]

MIN_RING_POINTS = 4

_RING_OPEN = re.compile(r"^\s*\(\(")
_RING_CLOSE = re.compile(r"\)\)\s*$")
_WKT_TAG = re.compile(r"^\s*POLYGON\s*", re.IGNORECASE)


# ================================================================================
#       Parsing
# ================================================================================
def parse_delimited_ring(text: str) -> Polygon:
    """Read ``((lon lat, ...))`` or an inline GeoJSON Polygon object.

    Every ring of the result is closed.
    """
    text = text.strip()
    if text.startswith("{"):
        return _parse_geojson_text(text)

    body = _RING_CLOSE.sub("", _RING_OPEN.sub("", text, count=1), count=1).strip()
    if not body:
        raise MalformedGeometry("empty polygon coordinates")

    ring = [_parse_pair(piece) for piece in body.split(",")]
    return Polygon(coordinates=[close_ring(ring)])


def parse_tagged_wkt(text: str) -> Polygon:
    """Read the XML rendering ``POLYGON ((lon lat, ...))``."""
    match = _WKT_TAG.match(text)
    if match is None:
        raise MalformedGeometry(f"expected a POLYGON geometry, got: {text[:40]!r}")
    return parse_delimited_ring(text[match.end() :])


def _parse_pair(piece: str) -> list[float]:
    tokens = piece.split()
    if len(tokens) != 2:
        raise MalformedGeometry(f"invalid coordinate pair: {piece.strip()!r}")

    try:
        lon, lat = float(tokens[0]), float(tokens[1])
    except ValueError:
        raise MalformedGeometry(f"invalid coordinate pair: {piece.strip()!r}") from None

    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise MalformedGeometry(f"coordinate is not finite: {piece.strip()!r}")

    return [lon, lat]


def _parse_geojson_text(text: str) -> Polygon:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedGeometry(f"invalid GeoJSON polygon: {e.msg}") from e

    if not isinstance(data, Mapping) or data.get("type") != "Polygon":
        raise MalformedGeometry("GeoJSON geometry must have type 'Polygon'")

    try:
        polygon = Polygon.model_validate(data)
    except ModelValidationError as e:
        raise MalformedGeometry(
            f"invalid GeoJSON polygon coordinates ({e.error_count()} errors)"
        ) from e

    if not polygon.coordinates:
        raise MalformedGeometry("GeoJSON polygon has no linear rings")

    for ring in polygon.coordinates:
        if any(len(position) < 2 for position in ring):
            raise MalformedGeometry("GeoJSON positions need a longitude and a latitude")

    # bbox is recomputed on export, never carried over
    return Polygon(coordinates=[close_ring(ring) for ring in polygon.coordinates])


# ================================================================================
#       Ring helpers
# ================================================================================
def close_ring(ring: LinearRing) -> LinearRing:
    """Return ``ring`` with its first position appended when it is open."""
    ring = [list(position) for position in ring]
    if ring and ring[0][:2] != ring[-1][:2]:
        ring.append(list(ring[0]))
    return ring


def bounding_box(ring: LinearRing) -> BoundingBox:
    if not ring:
        raise InvalidGeometry("cannot compute the bounding box of an empty ring")

    lons = [position[0] for position in ring]
    lats = [position[1] for position in ring]
    return BoundingBox(min(lons), min(lats), max(lons), max(lats))


def to_geojson(polygon: Polygon) -> Polygon:
    """Return an OGC compliant copy of ``polygon``: closed rings plus bbox."""
    if not polygon.coordinates:
        raise InvalidGeometry("GeoJSON polygon must have at least one linear ring")

    rings = []
    for index, ring in enumerate(polygon.coordinates):
        if len(ring) < MIN_RING_POINTS:
            raise InvalidGeometry(
                f"linear ring {index} must have at least {MIN_RING_POINTS}"
                f" coordinate pairs, got {len(ring)}"
            )
        rings.append(close_ring(ring))

    return Polygon(coordinates=rings, bbox=list(bounding_box(rings[0])))


# ================================================================================
#       Formatting
# ================================================================================
def to_delimited_ring(polygon: Polygon | Mapping | None) -> str:
    """Render ring 0 as ``((lon lat, ...))``; holes are dropped."""
    body = _outer_ring_text(polygon)
    return f"(({body}))" if body else ""


def to_tagged_wkt(polygon: Polygon | Mapping | None) -> str:
    """Render ring 0 as ``POLYGON ((lon lat, ...))``."""
    body = _outer_ring_text(polygon)
    return f"POLYGON (({body}))" if body else ""


def _outer_ring_text(polygon: Polygon | Mapping | None) -> str:
    polygon = _coerce_polygon(polygon)
    if polygon is None or not polygon.coordinates:
        return ""

    return ", ".join(
        f"{_format_ordinate(position[0])} {_format_ordinate(position[1])}"
        for position in polygon.coordinates[0]
        if len(position) >= 2
    )


def _coerce_polygon(polygon: Polygon | Mapping | None) -> Polygon | None:
    if polygon is None or isinstance(polygon, Polygon):
        return polygon

    if isinstance(polygon, Mapping):
        try:
            return Polygon.model_validate(polygon, strict=True)
        except ModelValidationError as e:
            logger.debug("Ignoring malformed polygon: %s", e)
            return None

    logger.debug("Ignoring polygon of unexpected type %s", type(polygon).__name__)
    return None


def _format_ordinate(value: float) -> str:
    # Shortest round-trip form, integral values without a trailing ".0"
    value = float(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)
