from .cipher import FieldCipher, decrypt, encrypt
from .json_codec import generate_json
from .parser import parse_text_file
from .text_codec import json_to_text, xml_to_text
from .xml_codec import generate_xml

__all__ = [
    "FieldCipher",
    "decrypt",
    "encrypt",
    "generate_json",
    "generate_xml",
    "json_to_text",
    "parse_text_file",
    "xml_to_text",
]
