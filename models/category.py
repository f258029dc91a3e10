import re
from pydantic import BaseModel, field_validator

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

class Category(BaseModel):
    id: str
    color: str

    @field_validator("id")
    @classmethod
    def _non_empty(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("category id must not be empty")
        return v

    @field_validator("color")
    @classmethod
    def _hex(cls, v: str):
        if not HEX_COLOR.match(v):
            raise ValueError(f"color must be a hex string like #ff0000, got {v!r}")
        return v
