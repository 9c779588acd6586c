# File: /app/schemas/core_entities.py | Version: 3.0 | Title: Space JSON:API payloads
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas._base import AttributesSchema
from app.schemas.jsonapi import GenericLinks, RelationGeneric

APISpaces = "spaces"


class SpaceAttributes(AttributesSchema):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="created-at")
    updated_at: Optional[datetime] = Field(default=None, alias="updated-at")


class SpaceRelationships(AttributesSchema):
    owned_by: Optional[RelationGeneric] = Field(default=None, alias="owned-by")
    workitemtypes: Optional[RelationGeneric] = None


class SpaceData(BaseModel):
    type: str = APISpaces
    id: Optional[UUID] = None
    attributes: SpaceAttributes
    relationships: Optional[SpaceRelationships] = None
    links: Optional[GenericLinks] = None


class CreateSpacePayload(BaseModel):
    data: SpaceData


class SpaceSingle(BaseModel):
    data: SpaceData
