from .client import CORE_FIELDS, IMPORT_REQUIRED_FIELDS, ClientRecord
from .geometry import BoundingBox, LinearRing, Polygon, Position
from .serde_base import SerdeBase

__all__ = [
    "CORE_FIELDS",
    "IMPORT_REQUIRED_FIELDS",
    "BoundingBox",
    "ClientRecord",
    "LinearRing",
    "Polygon",
    "Position",
    "SerdeBase",
]
