import json

from converter.core.cipher import FieldCipher
from converter.core.geometry import to_geojson
from converter.core.parser import parse_text_file
from converter.shared import Logger

logger = Logger(__name__).get_logger()

__all__ = ["generate_json"]


def generate_json(content: str, delimiter: str, key: str) -> str:
    """
    Convert delimited client lines into a ``{"clientes": [...]}`` document.

    ``tarjeta`` is encrypted with ``key``. Polygons that could not be read
    from the text are dropped, but a polygon that was read must be a valid
    GeoJSON Polygon: a ring with fewer than four points raises
    ``InvalidGeometry`` and fails the whole document.
    """
    records = parse_text_file(content, delimiter, strict_geometry=False)
    cipher = FieldCipher(key)

    clients = []
    for record in records:
        encrypted = record.model_copy(
            update={
                "card": cipher.encrypt(record.card),
                "polygon": to_geojson(record.polygon) if record.polygon else None,
            }
        )
        clients.append(encrypted.to_wire())

    logger.info("Generated JSON document with %d clients", len(clients))
    return json.dumps({"clientes": clients}, indent=2, ensure_ascii=False)
