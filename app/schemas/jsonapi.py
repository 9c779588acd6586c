# File: /app/schemas/jsonapi.py | Version: 1.0 | Title: JSON:API envelope building blocks
from __future__ import annotations

from typing import List, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.schemas._base import AttributesSchema

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class JSONAPIResponse(JSONResponse):
    media_type = JSONAPI_MEDIA_TYPE


class GenericLinks(AttributesSchema):
    self_: Optional[str] = Field(default=None, alias="self")
    related: Optional[str] = None


class GenericData(BaseModel):
    type: str
    id: str
    links: Optional[GenericLinks] = None


class RelationGeneric(BaseModel):
    data: Optional[GenericData] = None
    links: Optional[GenericLinks] = None


class RelationGenericList(BaseModel):
    data: List[GenericData] = []


class PagingMeta(AttributesSchema):
    total_count: int = Field(alias="totalCount")


class JSONAPIErrorItem(BaseModel):
    id: Optional[str] = None
    code: Optional[str] = None
    status: Optional[str] = None
    title: Optional[str] = None
    detail: str


class JSONAPIErrors(BaseModel):
    errors: List[JSONAPIErrorItem]


# Shared `responses=` entry for routes documenting the error envelope
ERROR_RESPONSES = {
    400: {"model": JSONAPIErrors},
    401: {"model": JSONAPIErrors},
    403: {"model": JSONAPIErrors},
    404: {"model": JSONAPIErrors},
    409: {"model": JSONAPIErrors},
    500: {"model": JSONAPIErrors},
}


def error_responses(*codes: int) -> dict:
    return {code: ERROR_RESPONSES[code] for code in codes}
