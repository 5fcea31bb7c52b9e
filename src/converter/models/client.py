from pydantic import Field

from .geometry import Polygon
from .serde_base import SerdeBase

# Wire names of the six textual fields, in document order
CORE_FIELDS = ("documento", "nombres", "apellidos", "tarjeta", "tipo", "telefono")

# Fields a JSON or XML document must carry to be turned back into text
IMPORT_REQUIRED_FIELDS = ("documento", "nombres", "apellidos", "tarjeta")


class ClientRecord(SerdeBase):
    # card holds plaintext or an encrypted token depending on pipeline stage
    document: str = Field(alias="documento")
    first_names: str = Field(alias="nombres")
    last_names: str = Field(alias="apellidos")
    card: str = Field(alias="tarjeta")
    client_type: str = Field(alias="tipo")
    phone: str = Field(alias="telefono")
    polygon: Polygon | None = Field(default=None, alias="poligono")

    def core_values(self) -> list[str]:
        return [
            self.document,
            self.first_names,
            self.last_names,
            self.card,
            self.client_type,
            self.phone,
        ]
