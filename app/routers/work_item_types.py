# File: /app/routers/work_item_types.py | Version: 1.0 | Title: Work Item Types Router (show/create/list + wire <-> model conversion)
from __future__ import annotations

import logging
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.conditional import conditional_response
from app.core.config import settings
from app.core.errors import ConversionError, DataConflictError
from app.core.paging import parse_page
from app.core.permissions import require_space_owner
from app.crud import core_entities as crud_core
from app.crud import work_item_types as crud_wit
from app.db.session import get_db, transactional
from app.dependencies import WorkItemTypeCacheConfig, get_cache_control_config
from app.models import field_types as ft
from app.models.work_item_type import (
    GUIDED_CHILD_TYPES,
    SYSTEM_PLANNER_ITEM,
    SYSTEM_SPACE_ID,
    WorkItemType,
    as_utc,
    compute_etag,
)
from app.schemas import work_item_type as schema
from app.schemas.jsonapi import (
    GenericData,
    GenericLinks,
    JSONAPIResponse,
    PagingMeta,
    RelationGeneric,
    RelationGenericList,
    error_responses,
)
from app.security import get_current_identity

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Work Item Types"], default_response_class=JSONAPIResponse)


# =========================
# HREFS
# =========================


def space_href(space_id) -> str:
    return f"/spaces/{space_id}"


def work_item_type_href(space_id, wit_id) -> str:
    return f"/spaces/{space_id}/workitemtypes/{wit_id}"


def absolute_url(request: Request, path: str) -> str:
    return str(request.base_url).rstrip("/") + path


# =========================
# CONVERSION
# =========================


def convert_field_type_from_model(t: ft.FieldType) -> schema.FieldType:
    if isinstance(t, ft.ListType):
        return schema.FieldType(kind=t.kind.value, component_type=t.component_type.kind.value)
    if isinstance(t, ft.EnumType):
        return schema.FieldType(
            kind=t.kind.value, base_type=t.base_type.kind.value, values=list(t.values)
        )
    if isinstance(t, ft.SimpleType):
        return schema.FieldType(kind=t.kind.value)
    raise TypeError(f"unexpected field type {t!r}")


def _simple_kind(raw: Optional[str], role: str, owner: ft.Kind) -> ft.SimpleType:
    if raw is None:
        raise ConversionError(f"{owner.value} field type requires a {role}")
    kind = ft.kind_from_string(raw)
    if not kind.is_simple():
        raise ConversionError(f"{role} '{kind.value}' of a {owner.value} is not a simple type")
    return ft.SimpleType(kind)


def convert_field_type_to_model(t: schema.FieldType) -> ft.FieldType:
    kind = ft.kind_from_string(t.kind)
    if kind is ft.Kind.LIST:
        return ft.ListType(component_type=_simple_kind(t.component_type, "componentType", kind))
    if kind is ft.Kind.ENUM:
        base_type = _simple_kind(t.base_type, "baseType", kind)
        values = ft.convert_list(base_type.convert_to_model, t.values)
        return ft.EnumType(base_type=base_type, values=values)
    return ft.SimpleType(kind)


def convert_field_definitions_to_model(
    fields: Dict[str, schema.FieldDefinition],
) -> Dict[str, ft.FieldDefinition]:
    """All or nothing: the first bad field aborts the whole conversion."""
    model_fields: Dict[str, ft.FieldDefinition] = {}
    for name, definition in fields.items():
        try:
            converted_type = convert_field_type_to_model(definition.type)
        except ConversionError as exc:
            raise ConversionError(f"field '{name}': {exc.detail}") from exc
        model_fields[name] = ft.FieldDefinition(
            type=converted_type,
            label=definition.label or name,
            description=definition.description,
            required=definition.required,
        )
    return model_fields


def _guided_child_types(wit_id: str) -> Optional[RelationGenericList]:
    children = GUIDED_CHILD_TYPES.get(wit_id)
    if not children:
        return None
    return RelationGenericList(
        data=[GenericData(type=schema.APIWorkItemTypes, id=child) for child in children]
    )


def convert_work_item_type_from_model(request: Request, t: WorkItemType) -> schema.WorkItemTypeData:
    space_url = absolute_url(request, space_href(t.space_id))
    return schema.WorkItemTypeData(
        id=t.id,
        attributes=schema.WorkItemTypeAttributes(
            name=t.name,
            description=t.description,
            icon=t.icon,
            version=t.version,
            extended_type_name=t.extended_type_id,
            created_at=as_utc(t.created_at),
            updated_at=as_utc(t.updated_at),
            fields={
                name: schema.FieldDefinition(
                    type=convert_field_type_from_model(d.type),
                    label=d.label,
                    description=d.description,
                    required=d.required,
                )
                for name, d in t.fields.items()
            },
        ),
        relationships=schema.WorkItemTypeRelationships(
            space=RelationGeneric(
                data=GenericData(type="spaces", id=str(t.space_id)),
                links=GenericLinks(self_=space_url, related=space_url),
            ),
            guided_child_types=_guided_child_types(t.id),
        ),
        links=GenericLinks(self_=absolute_url(request, work_item_type_href(t.space_id, t.id))),
    )


def _without_planner_item(wits: List[WorkItemType]) -> List[WorkItemType]:
    return [w for w in wits if w.id != SYSTEM_PLANNER_ITEM]


# =========================
# ROUTES
# =========================


@router.get(
    "/spaces/{space_id}/workitemtypes/{wit_id}",
    response_model=schema.WorkItemTypeSingle,
    response_model_exclude_none=True,
    responses={304: {"description": "Not Modified"}, **error_responses(400, 404)},
)
def show_work_item_type(
    space_id: UUID,
    wit_id: UUID,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    cache_config: WorkItemTypeCacheConfig = Depends(get_cache_control_config),
):
    with transactional(db):
        wit = crud_wit.load_work_item_type(db, space_id, wit_id)
        not_modified = conditional_response(
            request,
            response,
            etag=compute_etag([wit]),
            last_modified=wit.last_modified,
            cache_control=cache_config.get_cache_control_work_item_type(),
        )
        if not_modified is not None:
            return not_modified
        return schema.WorkItemTypeSingle(data=convert_work_item_type_from_model(request, wit))


@router.post(
    "/spaces/{space_id}/workitemtypes",
    status_code=201,
    response_model=schema.WorkItemTypeSingle,
    response_model_exclude_none=True,
    responses=error_responses(400, 401, 403, 404, 409),
)
def create_work_item_type(
    space_id: UUID,
    payload: schema.CreateWorkItemTypePayload,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    identity_id: str = Depends(get_current_identity),
):
    attrs = payload.data.attributes
    try:
        with transactional(db):
            space = crud_core.load_space(db, space_id)
            require_space_owner(space, identity_id)

            # The space in the URL wins over any space relationship in the payload
            model_fields = convert_field_definitions_to_model(attrs.fields)
            wit = crud_wit.create_work_item_type(
                db,
                space_id=space.id,
                wit_id=payload.data.id,
                extended_type_id=attrs.extended_type_name,
                name=attrs.name,
                description=attrs.description,
                icon=attrs.icon,
                fields=model_fields,
            )
            data = convert_work_item_type_from_model(request, wit)
    except IntegrityError:
        # A concurrent create won the race past the duplicate checks
        raise DataConflictError(
            f"work item type '{attrs.name}' already exists in space {space_id}"
        ) from None

    response.headers["Location"] = work_item_type_href(space.id, data.id)
    return schema.WorkItemTypeSingle(data=data)


@router.get(
    "/spaces/{space_id}/workitemtypes",
    response_model=schema.WorkItemTypeList,
    response_model_exclude_none=True,
    responses={304: {"description": "Not Modified"}, **error_responses(400)},
)
def list_work_item_types(
    space_id: UUID,
    request: Request,
    response: Response,
    page_offset: Optional[str] = Query(default=None, alias="page[offset]"),
    page_limit: Optional[str] = Query(default=None, alias="page[limit]"),
    page: Optional[str] = Query(default=None, description="Legacy paging: 'limit' or 'offset,limit'"),
    db: Session = Depends(get_db),
    cache_config: WorkItemTypeCacheConfig = Depends(get_cache_control_config),
):
    logger.debug("Listing work item types per space", extra={"space_id": str(space_id)})
    start, limit = parse_page(
        page_offset, page_limit, page, default_limit=settings.DEFAULT_PAGE_LIMIT
    )

    with transactional(db):
        source_space = str(space_id)
        wits = _without_planner_item(crud_wit.list_work_item_types(db, source_space, start, limit))
        if not wits:
            # Spaces without their own types see the system space's types until
            # space templates can set a space up; same paging window.
            logger.info(
                "No work item types in space; falling back to system space",
                extra={"space_id": source_space},
            )
            source_space = SYSTEM_SPACE_ID
            wits = _without_planner_item(
                crud_wit.list_work_item_types(db, source_space, start, limit)
            )
        total = crud_wit.count_work_item_types(
            db, source_space, exclude_ids=(SYSTEM_PLANNER_ITEM,)
        )

        not_modified = conditional_response(
            request,
            response,
            etag=compute_etag(wits),
            last_modified=max((w.last_modified for w in wits), default=None),
            cache_control=cache_config.get_cache_control_work_item_types(),
        )
        if not_modified is not None:
            return not_modified
        return schema.WorkItemTypeList(
            data=[convert_work_item_type_from_model(request, w) for w in wits],
            meta=PagingMeta(total_count=total),
        )
