# File: /app/routers/core_entities.py | Version: 2.0 | Path: /app/routers/core_entities.py
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DataConflictError
from app.crud import core_entities as crud_core
from app.db.session import get_db, transactional
from app.models.core_entities import Space
from app.models.work_item_type import as_utc
from app.routers.work_item_types import absolute_url, space_href
from app.schemas import core_entities as schema
from app.schemas.jsonapi import GenericData, GenericLinks, JSONAPIResponse, RelationGeneric, error_responses
from app.security import get_current_identity

router = APIRouter(tags=["Spaces"], default_response_class=JSONAPIResponse)


def convert_space_from_model(request: Request, space: Space) -> schema.SpaceData:
    self_url = absolute_url(request, space_href(space.id))
    owned_by = None
    if space.owner_id is not None:
        owned_by = RelationGeneric(data=GenericData(type="identities", id=str(space.owner_id)))
    wits_url = absolute_url(request, f"{space_href(space.id)}/workitemtypes")
    return schema.SpaceData(
        id=space.id,
        attributes=schema.SpaceAttributes(
            name=space.name,
            description=space.description,
            created_at=as_utc(space.created_at),
            updated_at=as_utc(space.updated_at),
        ),
        relationships=schema.SpaceRelationships(
            owned_by=owned_by,
            workitemtypes=RelationGeneric(links=GenericLinks(related=wits_url)),
        ),
        links=GenericLinks(self_=self_url),
    )


# ----- SPACE ROUTES -----


@router.post(
    "/spaces",
    status_code=201,
    response_model=schema.SpaceSingle,
    response_model_exclude_none=True,
    responses=error_responses(400, 401, 409),
)
def create_space(
    payload: schema.CreateSpacePayload,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    identity_id: str = Depends(get_current_identity),
):
    # Any authenticated user may create a space; they become its owner.
    try:
        with transactional(db):
            space = crud_core.create_space(
                db,
                name=payload.data.attributes.name,
                description=payload.data.attributes.description,
                owner_id=identity_id,
                space_id=str(payload.data.id) if payload.data.id else None,
            )
            data = convert_space_from_model(request, space)
    except IntegrityError:
        raise DataConflictError(f"space with id '{payload.data.id}' already exists")
    response.headers["Location"] = space_href(data.id)
    return schema.SpaceSingle(data=data)


@router.get(
    "/spaces/{space_id}",
    response_model=schema.SpaceSingle,
    response_model_exclude_none=True,
    responses=error_responses(400, 404),
)
def get_space(
    space_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
):
    space = crud_core.load_space(db, space_id)
    return schema.SpaceSingle(data=convert_space_from_model(request, space))
