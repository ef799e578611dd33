"\"\"\"Shared pydantic base for wire-facing models.\"\"\""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that reads and writes camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """Serialize with camelCase keys for JSON responses."""
        return self.model_dump(mode="json", by_alias=True)
