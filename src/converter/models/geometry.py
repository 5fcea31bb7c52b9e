from typing import Literal, NamedTuple

from .serde_base import SerdeBase

type Position = list[float]
type LinearRing = list[Position]


class BoundingBox(NamedTuple):
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float


class Polygon(SerdeBase):
    """GeoJSON Polygon (RFC 7946).

    Ring 0 is the outer boundary, any further rings are holes. ``bbox`` is
    only ever derived from ring 0 and is never trusted on input.
    """

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[LinearRing]
    bbox: list[float] | None = None
