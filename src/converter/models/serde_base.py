from pydantic import BaseModel, ConfigDict


class SerdeBase(BaseModel):
    """Models that travel on the wire under their alias names."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
