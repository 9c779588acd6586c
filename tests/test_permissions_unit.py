# File: tests/test_permissions_unit.py | Version: 2.0 | Path: /tests/test_permissions_unit.py
import logging
from types import SimpleNamespace

import pytest

from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.permissions import is_space_owner, require_space_owner

# Plain stand-ins: the checks only read `id` and `owner_id`,
# so these tests don't depend on DB models or fixtures.


def _space(owner_id="U1"):
    return SimpleNamespace(id="S1", owner_id=owner_id)


def test_is_space_owner_matches_on_string_form():
    assert is_space_owner(_space("U1"), "U1") is True
    assert is_space_owner(_space("U1"), "U2") is False
    assert is_space_owner(_space(None), "U1") is False
    assert is_space_owner(_space("U1"), None) is False


def test_require_space_owner_allows_owner():
    require_space_owner(_space("U1"), "U1")


def test_require_space_owner_without_identity_is_401():
    with pytest.raises(UnauthorizedError) as excinfo:
        require_space_owner(_space("U1"), None)
    assert excinfo.value.status_code == 401


def test_require_space_owner_denies_and_logs_non_owner(caplog):
    with caplog.at_level(logging.WARNING, logger="app.core.permissions"):
        with pytest.raises(ForbiddenError) as excinfo:
            require_space_owner(_space("U1"), "U2")

    assert excinfo.value.status_code == 403
    record = next(r for r in caplog.records if r.name == "app.core.permissions")
    assert record.space_id == "S1"
    assert record.space_owner == "U1"
    assert record.current_user == "U2"


def test_require_space_owner_custom_message():
    with pytest.raises(ForbiddenError) as excinfo:
        require_space_owner(_space(None), "U2", "only the space owner can do that")
    assert excinfo.value.detail == "only the space owner can do that"
