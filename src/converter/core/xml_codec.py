import xml.etree.ElementTree as ET

from converter.core.cipher import FieldCipher
from converter.core.errors import (
    InvalidInput,
    InvalidRecord,
    NoValidRecords,
    RecordProcessingError,
)
from converter.core.geometry import to_tagged_wkt
from converter.core.parser import parse_text_file
from converter.core.xml_tree import add_text_element, to_pretty_xml
from converter.models import CORE_FIELDS, ClientRecord
from converter.shared import Logger

logger = Logger(__name__).get_logger()

__all__ = ["MIN_KEY_LENGTH", "generate_xml", "validate_client"]

MIN_KEY_LENGTH = 8


def generate_xml(content: str, delimiter: str, key: str) -> str:
    """
    Convert delimited client lines into a ``<clientes>`` document.

    One bad record fails the whole document with ``RecordProcessingError``
    naming the record; a polygon that cannot be rendered is left out.
    """
    if not content or not content.strip():
        raise InvalidInput("content must not be empty")
    if not delimiter:
        raise InvalidInput("delimiter must not be empty")
    if not key or len(key) < MIN_KEY_LENGTH:
        raise InvalidInput(f"key must be at least {MIN_KEY_LENGTH} characters long")

    records = parse_text_file(content, delimiter, strict_geometry=False)
    if not records:
        raise NoValidRecords()

    cipher = FieldCipher(key)
    root = ET.Element("clientes")

    for index, record in enumerate(records, start=1):
        try:
            validate_client(record, index)
            _append_client(root, record, cipher)
        except InvalidRecord as e:
            logger.warning("Rejecting XML conversion: %s", e)
            raise RecordProcessingError(index) from e

    logger.info("Generated XML document with %d clients", len(records))
    return to_pretty_xml(root)


def validate_client(record: ClientRecord, index: int) -> None:
    for field, value in zip(CORE_FIELDS, record.core_values(), strict=True):
        if not value or not value.strip():
            raise InvalidRecord(index, field)


def _append_client(root: ET.Element, record: ClientRecord, cipher: FieldCipher) -> None:
    cliente = ET.SubElement(root, "cliente")

    add_text_element(cliente, "documento", record.document.strip())
    add_text_element(cliente, "nombres", record.first_names.strip())
    add_text_element(cliente, "apellidos", record.last_names.strip())
    add_text_element(cliente, "tarjeta", cipher.encrypt(record.card))
    add_text_element(cliente, "tipo", record.client_type.strip())
    add_text_element(cliente, "telefono", record.phone.strip())

    polygon_text = to_tagged_wkt(record.polygon)
    if polygon_text:
        add_text_element(cliente, "poligono", polygon_text)
