# File: tests/test_paging_unit.py | Version: 1.0 | Path: /tests/test_paging_unit.py
import pytest

from app.core.errors import BadParameterError
from app.core.paging import parse_page


def test_defaults_when_nothing_given():
    assert parse_page(None, None) == (0, 100)
    assert parse_page(None, None, default_limit=20) == (0, 20)


def test_offset_and_limit():
    assert parse_page("5", "10") == (5, 10)
    assert parse_page(" 0 ", "1") == (0, 1)


def test_legacy_single_value_is_a_limit():
    assert parse_page(None, None, "7") == (0, 7)


def test_legacy_pair_is_offset_and_limit():
    assert parse_page(None, None, "3,4") == (3, 4)


def test_explicit_params_override_legacy():
    assert parse_page("9", None, "3,4") == (9, 4)
    assert parse_page(None, "2", "3,4") == (3, 2)


@pytest.mark.parametrize(
    "offset,limit,legacy",
    [
        ("-1", None, None),
        ("abc", None, None),
        (None, "0", None),
        (None, "1.5", None),
        (None, None, "1,2,3"),
        (None, None, ",5"),
        (None, None, "0"),
        ("9223372036854775808", None, None),
        (None, "99999999999999999999999", None),
    ],
)
def test_malformed_paging_raises_bad_parameter(offset, limit, legacy):
    with pytest.raises(BadParameterError) as excinfo:
        parse_page(offset, limit, legacy)
    assert excinfo.value.status_code == 400
    assert "Could not parse paging" in excinfo.value.detail or "must be" in excinfo.value.detail


def test_largest_database_integer_is_accepted():
    assert parse_page(str(2**63 - 1), str(2**63 - 1)) == (2**63 - 1, 2**63 - 1)
