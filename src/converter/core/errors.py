"""Error kinds raised by the conversion engine.

Every error derives from :class:`ConversionError` so the HTTP layer can turn
the whole family into a client error in one place.
"""

__all__ = [
    "ConversionError",
    "DecryptionError",
    "IncompleteRecord",
    "InvalidGeometry",
    "InvalidInput",
    "InvalidRecord",
    "MalformedGeometry",
    "MalformedJson",
    "MalformedLine",
    "MalformedXml",
    "NoClientElements",
    "NoValidRecords",
    "RecordProcessingError",
    "UnsupportedFileType",
    "ValidationError",
]


class ConversionError(Exception):
    """Base class for every failure of a conversion call."""


class ValidationError(ConversionError):
    """The input text or its geometry does not have the expected format."""


class MalformedLine(ValidationError):
    def __init__(self, line_number: int, detail: str, expected: int = 6, got: int | None = None):
        self.line_number = line_number
        self.expected = expected
        self.got = got
        self.detail = detail
        super().__init__(f"line {line_number}: {detail}")


class MalformedGeometry(ValidationError):
    """Geometry text could not be read as a polygon."""


class InvalidGeometry(ValidationError):
    """Polygon is readable but structurally invalid (empty, short ring)."""


class DecryptionError(ConversionError):
    """Token is malformed or was not produced with the given key."""


class InvalidInput(ConversionError):
    """Precondition failure: blank content or delimiter, short key."""


class NoValidRecords(ConversionError):
    def __init__(self, message: str = "no valid client records found in the input"):
        super().__init__(message)


class InvalidRecord(ConversionError):
    def __init__(self, index: int, field: str):
        self.index = index
        self.field = field
        super().__init__(f"required field '{field}' is empty in record {index}")


class RecordProcessingError(ConversionError):
    # Field level detail stays on __cause__, the message only names the record
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"error processing record {index}")


class IncompleteRecord(ConversionError):
    def __init__(self, index: int, missing: list[str]):
        self.index = index
        self.missing = missing
        super().__init__(
            f"record {index} must have documento, nombres, apellidos and tarjeta"
            f" (missing: {', '.join(missing)})"
        )


class MalformedJson(ConversionError):
    pass


class MalformedXml(ConversionError):
    pass


class NoClientElements(ConversionError):
    pass


class UnsupportedFileType(ConversionError):
    def __init__(self, content_type: str | None):
        self.content_type = content_type
        super().__init__(
            f"Unsupported file type: {content_type}. Supported types: JSON, XML"
        )
