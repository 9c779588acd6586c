# File: /app/models/work_item_type.py | Version: 1.0 | Title: Work item type model + built-in system type ids
from __future__ import annotations

import hashlib
from datetime import datetime, UTC
from typing import TYPE_CHECKING, Any, Dict, List as TList, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base
from app.models.core_entities import gen_uuid, utcnow
from app.models.field_types import (
    FieldDefinition,
    field_definitions_from_json,
    field_definitions_to_json,
)

if TYPE_CHECKING:
    from app.models.core_entities import Space

# ----- Built-in ids -----

SYSTEM_SPACE_ID = "2e0698d8-753e-4cef-bb7c-f027634824a2"

SYSTEM_PLANNER_ITEM = "86af5178-9b41-469b-9096-57e5155c3f31"
SYSTEM_TASK = "bbf35418-04b6-426c-a60b-7f80beb0b624"
SYSTEM_VALUE_PROPOSITION = "3194ab60-855b-4155-9005-9dce4a05f1eb"
SYSTEM_FUNDAMENTAL = "ee7ca005-f81d-4eea-9b9b-1965df0988d0"
SYSTEM_EXPERIENCE = "b9a71831-c803-4f66-8774-4193fffd1311"
SYSTEM_FEATURE = "0a24d3c2-e0a6-4686-8051-ec0ea1915a28"
SYSTEM_SCENARIO = "71171e90-6d35-498f-a6a7-2083b5267c18"
SYSTEM_BUG = "26787039-b68f-4e28-8814-c2f93be1ef4e"
SYSTEM_PAPERCUTS = "6d603ab4-7c5e-4c5f-bba8-a3ba9d370985"

# Suggested next-step types shown on a type's relationships.
# TODO: move into the type data once space templates can carry it.
GUIDED_CHILD_TYPES: Dict[str, tuple] = {
    SYSTEM_SCENARIO: (SYSTEM_EXPERIENCE, SYSTEM_VALUE_PROPOSITION),
    SYSTEM_FUNDAMENTAL: (SYSTEM_EXPERIENCE, SYSTEM_VALUE_PROPOSITION),
    SYSTEM_PAPERCUTS: (SYSTEM_EXPERIENCE, SYSTEM_VALUE_PROPOSITION),
    SYSTEM_EXPERIENCE: (SYSTEM_FEATURE, SYSTEM_BUG),
    SYSTEM_VALUE_PROPOSITION: (SYSTEM_FEATURE, SYSTEM_BUG),
    SYSTEM_FEATURE: (SYSTEM_TASK, SYSTEM_BUG),
    SYSTEM_BUG: (SYSTEM_TASK,),
}


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; they are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class WorkItemType(Base):
    __tablename__ = "work_item_type"
    __table_args__ = (
        UniqueConstraint("space_id", "name", name="uq_work_item_type_space_name"),
        Index("ix_work_item_type_space_created", "space_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    space_id: Mapped[str] = mapped_column(ForeignKey("space.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    icon: Mapped[Optional[str]] = mapped_column(String(255))
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    extended_type_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("work_item_type.id"), nullable=True
    )
    fields_json: Mapped[Dict[str, Any]] = mapped_column("fields", JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    space: Mapped["Space"] = relationship(back_populates="work_item_types")
    extended_type: Mapped[Optional["WorkItemType"]] = relationship(
        "WorkItemType", remote_side=lambda: [WorkItemType.id]
    )

    @property
    def fields(self) -> Dict[str, FieldDefinition]:
        return field_definitions_from_json(self.fields_json)

    @fields.setter
    def fields(self, value: Dict[str, FieldDefinition]) -> None:
        self.fields_json = field_definitions_to_json(value)

    # ----- cache validators -----

    @property
    def last_modified(self) -> datetime:
        return as_utc(self.updated_at or self.created_at)

    def etag_data(self) -> str:
        return f"{self.id}-{self.version}"


def compute_etag(entities: TList[WorkItemType]) -> str:
    digest = hashlib.md5(usedforsecurity=False)
    for e in entities:
        digest.update(e.etag_data().encode("utf-8"))
        digest.update(b"\n")
    return f'"{digest.hexdigest()}"'
