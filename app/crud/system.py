# File: /app/crud/system.py | Version: 1.0 | Title: Seed the system space and its built-in work item types
from __future__ import annotations

import logging
from typing import Dict

from sqlalchemy.orm import Session

from app.crud import core_entities as crud_core
from app.crud import work_item_types as crud_wit
from app.models.field_types import EnumType, FieldDefinition, Kind, ListType, SimpleType
from app.models.work_item_type import (
    SYSTEM_BUG,
    SYSTEM_EXPERIENCE,
    SYSTEM_FEATURE,
    SYSTEM_FUNDAMENTAL,
    SYSTEM_PAPERCUTS,
    SYSTEM_PLANNER_ITEM,
    SYSTEM_SCENARIO,
    SYSTEM_SPACE_ID,
    SYSTEM_TASK,
    SYSTEM_VALUE_PROPOSITION,
    WorkItemType,
)

logger = logging.getLogger(__name__)

SYSTEM_SPACE_NAME = "system.space"

SYSTEM_STATES = ["new", "open", "in progress", "resolved", "closed"]


def planner_item_fields() -> Dict[str, FieldDefinition]:
    return {
        "system.title": FieldDefinition(
            type=SimpleType(Kind.STRING), label="Title", description="The title text of the work item", required=True
        ),
        "system.description": FieldDefinition(
            type=SimpleType(Kind.MARKUP), label="Description", description="A descriptive text of the work item"
        ),
        "system.state": FieldDefinition(
            type=EnumType(base_type=SimpleType(Kind.STRING), values=list(SYSTEM_STATES)),
            label="State",
            description="The state of the work item",
            required=True,
        ),
        "system.creator": FieldDefinition(
            type=SimpleType(Kind.USER), label="Creator", description="The user that created the work item", required=True
        ),
        "system.assignees": FieldDefinition(
            type=ListType(component_type=SimpleType(Kind.USER)),
            label="Assignees",
            description="The users that are assigned to the work item",
        ),
        "system.labels": FieldDefinition(
            type=ListType(component_type=SimpleType(Kind.LABEL)),
            label="Labels",
            description="List of labels attached to the work item",
        ),
        "system.created_at": FieldDefinition(
            type=SimpleType(Kind.INSTANT), label="Created at", description="The date and time when the work item was created"
        ),
        "system.order": FieldDefinition(
            type=SimpleType(Kind.FLOAT), label="Execution Order", description="Execution Order of the workitem."
        ),
    }


# (id, name, icon, description); all extend the planner item
_SYSTEM_TYPES = [
    (SYSTEM_VALUE_PROPOSITION, "Value Proposition", "fa fa-diamond", "A value proposition for the product"),
    (SYSTEM_FUNDAMENTAL, "Fundamental", "fa fa-bank", "A fundamental capability of the product"),
    (SYSTEM_SCENARIO, "Scenario", "fa fa-bullseye", "A user scenario"),
    (SYSTEM_PAPERCUTS, "Papercuts", "fa fa-scissors", "A collection of small annoyances"),
    (SYSTEM_EXPERIENCE, "Experience", "fa fa-map", "A user experience"),
    (SYSTEM_FEATURE, "Feature", "fa fa-puzzle-piece", "A feature of the product"),
    (SYSTEM_TASK, "Task", "fa fa-tasks", "A unit of work"),
    (SYSTEM_BUG, "Bug", "fa fa-bug", "A defect"),
]


def seed_system_space(db: Session) -> int:
    """
    Idempotent. Creates the system space and any missing built-in types.
    Flushes only; returns the number of types created.
    """
    if crud_core.get_space(db, SYSTEM_SPACE_ID) is None:
        crud_core.create_space(
            db,
            space_id=SYSTEM_SPACE_ID,
            name=SYSTEM_SPACE_NAME,
            description="Holds the built-in work item types",
            owner_id=None,
        )

    created = 0
    if db.get(WorkItemType, SYSTEM_PLANNER_ITEM) is None:
        crud_wit.create_work_item_type(
            db,
            space_id=SYSTEM_SPACE_ID,
            wit_id=SYSTEM_PLANNER_ITEM,
            name="Planner Item",
            description="Description for Planner Item",
            icon="fa fa-paint-brush",
            fields=planner_item_fields(),
        )
        created += 1

    for wit_id, name, icon, description in _SYSTEM_TYPES:
        if db.get(WorkItemType, wit_id) is not None:
            continue
        crud_wit.create_work_item_type(
            db,
            space_id=SYSTEM_SPACE_ID,
            wit_id=wit_id,
            extended_type_id=SYSTEM_PLANNER_ITEM,
            name=name,
            description=description,
            icon=icon,
            fields={},
        )
        created += 1

    if created:
        logger.info("Seeded %d system work item types", created)
    return created
