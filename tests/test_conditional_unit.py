# File: tests/test_conditional_unit.py | Version: 1.0 | Path: /tests/test_conditional_unit.py
from datetime import datetime, timezone

from fastapi import Response
from starlette.requests import Request

from app.core.conditional import conditional_response, is_not_modified
from app.models.work_item_type import compute_etag

LAST_MODIFIED = datetime(2017, 3, 4, 5, 6, 7, 891011, tzinfo=timezone.utc)


def _request(**headers) -> Request:
    raw = [(k.replace("_", "-").lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


class _Entity:
    def __init__(self, id, version):
        self.id, self.version = id, version

    def etag_data(self):
        return f"{self.id}-{self.version}"


def test_etag_depends_on_id_and_version():
    a = compute_etag([_Entity("x", 0)])
    assert a == compute_etag([_Entity("x", 0)])
    assert a != compute_etag([_Entity("x", 1)])
    assert a != compute_etag([_Entity("y", 0)])
    assert a.startswith('"') and a.endswith('"')


def test_no_validators_means_modified():
    assert is_not_modified(_request(), '"e"', LAST_MODIFIED) is False


def test_if_none_match_list_and_weak_tags():
    assert is_not_modified(_request(if_none_match='"a", W/"e"'), '"e"', None) is True
    assert is_not_modified(_request(if_none_match="*"), '"e"', None) is True
    assert is_not_modified(_request(if_none_match='"a"'), '"e"', None) is False


def test_if_none_match_wins_over_if_modified_since():
    req = _request(if_none_match='"other"', if_modified_since="Fri, 01 Jan 2100 00:00:00 GMT")
    assert is_not_modified(req, '"e"', LAST_MODIFIED) is False


def test_if_modified_since_ignores_sub_second_precision():
    assert is_not_modified(
        _request(if_modified_since="Sat, 04 Mar 2017 05:06:07 GMT"), '"e"', LAST_MODIFIED
    )
    assert not is_not_modified(
        _request(if_modified_since="Sat, 04 Mar 2017 05:06:06 GMT"), '"e"', LAST_MODIFIED
    )
    assert not is_not_modified(_request(if_modified_since="garbage"), '"e"', LAST_MODIFIED)


def test_conditional_response_sets_headers_or_returns_304():
    response = Response()
    out = conditional_response(
        _request(), response, etag='"e"', last_modified=LAST_MODIFIED, cache_control="max-age=1"
    )
    assert out is None
    assert response.headers["etag"] == '"e"'
    assert response.headers["cache-control"] == "max-age=1"
    assert response.headers["last-modified"] == "Sat, 04 Mar 2017 05:06:07 GMT"

    out = conditional_response(
        _request(if_none_match='"e"'),
        Response(),
        etag='"e"',
        last_modified=LAST_MODIFIED,
        cache_control="max-age=1",
    )
    assert out is not None and out.status_code == 304
    assert out.headers["etag"] == '"e"'
