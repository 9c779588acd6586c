# File: tests/test_system_seed.py | Version: 1.0 | Path: /tests/test_system_seed.py
from app.crud import work_item_types as crud_wit
from app.crud.system import SYSTEM_SPACE_NAME, seed_system_space
from app.crud.core_entities import get_space
from app.models.field_types import EnumType, ListType
from app.models.work_item_type import SYSTEM_BUG, SYSTEM_PLANNER_ITEM, SYSTEM_SPACE_ID


def test_seed_is_idempotent(db_session):
    # the fixture already seeded once
    assert seed_system_space(db_session) == 0
    assert get_space(db_session, SYSTEM_SPACE_ID).name == SYSTEM_SPACE_NAME
    assert crud_wit.count_work_item_types(db_session, SYSTEM_SPACE_ID) == 9


def test_system_types_extend_the_planner_item(db_session):
    bug = crud_wit.load_work_item_type(db_session, SYSTEM_SPACE_ID, SYSTEM_BUG)
    assert bug.extended_type_id == SYSTEM_PLANNER_ITEM
    fields = bug.fields
    assert isinstance(fields["system.state"].type, EnumType)
    assert fields["system.state"].type.values[0] == "new"
    assert isinstance(fields["system.assignees"].type, ListType)
    assert fields["system.title"].required is True


def test_count_can_exclude_ids(db_session):
    assert (
        crud_wit.count_work_item_types(db_session, SYSTEM_SPACE_ID, exclude_ids=[SYSTEM_PLANNER_ITEM])
        == 8
    )
