# File: /app/crud/work_item_types.py | Version: 1.0 | Title: Work item type data access
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import DataConflictError, NotFoundError
from app.models.field_types import FieldDefinition
from app.models.work_item_type import WorkItemType

logger = logging.getLogger(__name__)


def get_work_item_type(
    db: Session, space_id: UUID | str, wit_id: UUID | str
) -> Optional[WorkItemType]:
    return (
        db.query(WorkItemType)
        .filter(
            WorkItemType.space_id == str(space_id),
            WorkItemType.id == str(wit_id),
        )
        .first()
    )


def load_work_item_type(db: Session, space_id: UUID | str, wit_id: UUID | str) -> WorkItemType:
    wit = get_work_item_type(db, space_id, wit_id)
    if wit is None:
        raise NotFoundError("work item type", wit_id)
    return wit


def list_work_item_types(
    db: Session, space_id: UUID | str, start: int = 0, limit: Optional[int] = None
) -> List[WorkItemType]:
    q = (
        db.query(WorkItemType)
        .filter(WorkItemType.space_id == str(space_id))
        .order_by(WorkItemType.created_at.asc(), WorkItemType.id.asc())
        .offset(start)
    )
    if limit is not None:
        q = q.limit(limit)
    return q.all()


def count_work_item_types(
    db: Session, space_id: UUID | str, exclude_ids: Iterable[str] = ()
) -> int:
    q = db.query(func.count(WorkItemType.id)).filter(WorkItemType.space_id == str(space_id))
    excluded = [str(i) for i in exclude_ids]
    if excluded:
        q = q.filter(WorkItemType.id.notin_(excluded))
    return q.scalar() or 0


def create_work_item_type(
    db: Session,
    *,
    space_id: UUID | str,
    name: str,
    fields: Dict[str, FieldDefinition],
    wit_id: Optional[UUID | str] = None,
    extended_type_id: Optional[UUID | str] = None,
    description: Optional[str] = None,
    icon: Optional[str] = None,
) -> WorkItemType:
    """
    Flushes but does not commit; the caller owns the transaction.
    Fields of an extended (base) type are inherited; own definitions win.
    """
    if wit_id is not None and db.get(WorkItemType, str(wit_id)) is not None:
        raise DataConflictError(f"work item type with id '{wit_id}' already exists")

    clash = (
        db.query(WorkItemType.id)
        .filter(WorkItemType.space_id == str(space_id), WorkItemType.name == name)
        .first()
    )
    if clash is not None:
        raise DataConflictError(f"work item type named '{name}' already exists in space {space_id}")

    all_fields: Dict[str, FieldDefinition] = {}
    if extended_type_id is not None:
        base = db.get(WorkItemType, str(extended_type_id))
        if base is None:
            raise NotFoundError("work item type", extended_type_id)
        all_fields.update(base.fields)
    all_fields.update(fields)

    wit = WorkItemType(
        space_id=str(space_id),
        name=name,
        description=description,
        icon=icon,
        version=0,
        extended_type_id=str(extended_type_id) if extended_type_id else None,
    )
    if wit_id is not None:
        wit.id = str(wit_id)
    wit.fields = all_fields
    db.add(wit)
    db.flush()
    db.refresh(wit)
    logger.debug("Created work item type %s in space %s", wit.id, space_id)
    return wit
