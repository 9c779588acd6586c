# File: /app/crud/core_entities.py | Version: 2.0 | Path: /app/crud/core_entities.py
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import DataConflictError, NotFoundError
from app.models import core_entities as models

# ----- SPACE CRUD -----


def create_space(
    db: Session, *, name: str, owner_id: Optional[str], description: Optional[str] = None,
    space_id: Optional[str] = None,
) -> models.Space:
    if space_id and db.get(models.Space, space_id) is not None:
        raise DataConflictError(f"space with id '{space_id}' already exists")
    new_space = models.Space(name=name, description=description, owner_id=owner_id)
    if space_id:
        new_space.id = space_id
    db.add(new_space)
    db.flush()
    db.refresh(new_space)
    return new_space


def get_space(db: Session, space_id: UUID | str) -> Optional[models.Space]:
    return db.query(models.Space).filter_by(id=str(space_id)).first()


def load_space(db: Session, space_id: UUID | str) -> models.Space:
    space = get_space(db, space_id)
    if space is None:
        raise NotFoundError("space", space_id)
    return space
