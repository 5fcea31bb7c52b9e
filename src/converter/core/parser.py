from collections.abc import Iterator

from converter.core.errors import MalformedGeometry, MalformedLine
from converter.core.geometry import parse_delimited_ring
from converter.models import ClientRecord, Polygon
from converter.shared import Logger

logger = Logger(__name__).get_logger()

__all__ = ["COMMENT_MARKER", "numbered_lines", "parse_text_file"]

COMMENT_MARKER = "//"
MIN_FIELDS = 6
MAX_FIELDS = 8
LINE_SEPARATOR = "\n"


def numbered_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` for every data line of ``content``.

    Line numbers are absolute and 1-based: blank and comment lines are not
    yielded but still count.
    """
    # Only "\n" ends a record; "\r" is trimmed with the fields
    for line_number, line in enumerate(content.split(LINE_SEPARATOR), start=1):
        if not line.strip() or line.startswith(COMMENT_MARKER):
            continue
        yield line_number, line


def parse_text_file(
    content: str,
    delimiter: str,
    *,
    strict_geometry: bool = True,
) -> list[ClientRecord]:
    """
    Parse delimited client lines:

        documento;nombres;apellidos;tarjeta;tipo;telefono;((lon lat, ...))

    The geometry field is optional. Eight fields are accepted when an empty
    field sits in front of the geometry, which is then read from the last one.

    With ``strict_geometry`` a geometry that cannot be parsed fails the line.
    Without it the geometry is dropped and the record kept, which is what the
    JSON and XML emitters want.
    """
    records = []
    for line_number, line in numbered_lines(content):
        parts = line.split(delimiter)

        if len(parts) < MIN_FIELDS:
            raise MalformedLine(
                line_number,
                f"expected >={MIN_FIELDS} fields, got {len(parts)}",
                expected=MIN_FIELDS,
                got=len(parts),
            )
        if len(parts) > MAX_FIELDS:
            raise MalformedLine(
                line_number,
                f"expected at most {MAX_FIELDS} fields, got {len(parts)}",
                expected=MAX_FIELDS,
                got=len(parts),
            )

        document, first_names, last_names, card, client_type, phone = (
            part.strip() for part in parts[:MIN_FIELDS]
        )

        polygon_text = ""
        if len(parts) > MIN_FIELDS:
            polygon_text = parts[-1].strip()

        if strict_geometry:
            polygon = _parse_polygon_strict(line_number, polygon_text)
        else:
            polygon = _parse_polygon_lenient(line_number, polygon_text)

        records.append(
            ClientRecord(
                document=document,
                first_names=first_names,
                last_names=last_names,
                card=card,
                client_type=client_type,
                phone=phone,
                polygon=polygon,
            )
        )

    logger.debug("Parsed %d client records", len(records))
    return records


def _parse_polygon_strict(line_number: int, text: str) -> Polygon | None:
    if not text:
        return None
    try:
        return parse_delimited_ring(text)
    except MalformedGeometry as e:
        raise MalformedLine(line_number, f"failed to parse polygon {text!r}: {e}") from e


def _parse_polygon_lenient(line_number: int, text: str) -> Polygon | None:
    if not text:
        return None
    try:
        return parse_delimited_ring(text)
    except MalformedGeometry as e:
        logger.warning("Dropping polygon on line %d: %s", line_number, e)
        return None
