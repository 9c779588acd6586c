# File: /app/schemas/_base.py | Version: 1.2 | Title: Pydantic Base Schema for JSON:API attribute blocks
from pydantic import BaseModel, ConfigDict


class AttributesSchema(BaseModel):
    """Attribute names on the wire are dashed ("created-at"); python names are snake_case."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
