# File: /app/schemas/work_item_type.py | Version: 1.0 | Title: Work item type JSON:API payloads
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas._base import AttributesSchema
from app.schemas.jsonapi import GenericLinks, PagingMeta, RelationGeneric, RelationGenericList

APIWorkItemTypes = "workitemtypes"


class FieldType(AttributesSchema):
    kind: str
    component_type: Optional[str] = Field(default=None, alias="componentType")
    base_type: Optional[str] = Field(default=None, alias="baseType")
    values: Optional[List[Any]] = None


class FieldDefinition(BaseModel):
    type: FieldType
    label: Optional[str] = None
    description: Optional[str] = None
    required: bool = False


class WorkItemTypeAttributes(AttributesSchema):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = None
    version: Optional[int] = None
    extended_type_name: Optional[UUID] = Field(default=None, alias="extended-type-name")
    created_at: Optional[datetime] = Field(default=None, alias="created-at")
    updated_at: Optional[datetime] = Field(default=None, alias="updated-at")
    fields: Dict[str, FieldDefinition] = {}


class WorkItemTypeRelationships(AttributesSchema):
    space: Optional[RelationGeneric] = None
    guided_child_types: Optional[RelationGenericList] = Field(
        default=None, alias="guided-child-types"
    )


class WorkItemTypeData(BaseModel):
    type: str = APIWorkItemTypes
    id: Optional[UUID] = None
    attributes: WorkItemTypeAttributes
    relationships: Optional[WorkItemTypeRelationships] = None
    links: Optional[GenericLinks] = None


class CreateWorkItemTypePayload(BaseModel):
    data: WorkItemTypeData


class WorkItemTypeSingle(BaseModel):
    data: WorkItemTypeData


class WorkItemTypeList(BaseModel):
    data: List[WorkItemTypeData]
    meta: Optional[PagingMeta] = None
