# File: /app/core/conditional.py | Version: 1.0 | Title: Conditional GET (ETag / Last-Modified / Cache-Control)
from __future__ import annotations

from datetime import datetime
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional

from fastapi import Request, Response

from app.models.work_item_type import as_utc


def _etag_matches(header: str, etag: str) -> bool:
    if header.strip() == "*":
        return True
    for candidate in header.split(","):
        candidate = candidate.strip()
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == etag:
            return True
    return False


def is_not_modified(request: Request, etag: str, last_modified: Optional[datetime]) -> bool:
    """If-None-Match wins over If-Modified-Since when both are sent."""
    inm = request.headers.get("if-none-match")
    if inm is not None:
        return _etag_matches(inm, etag)

    ims = request.headers.get("if-modified-since")
    if ims and last_modified is not None:
        try:
            since = parsedate_to_datetime(ims)
        except (TypeError, ValueError):
            return False
        # HTTP dates carry whole seconds only
        return as_utc(last_modified).replace(microsecond=0) <= as_utc(since)
    return False


def conditional_response(
    request: Request,
    response: Response,
    *,
    etag: str,
    last_modified: Optional[datetime],
    cache_control: str,
) -> Optional[Response]:
    """
    Set validators on `response`. Returns a ready 304 response when the
    client copy is still fresh, otherwise None and the caller renders the body.
    """
    headers = {"ETag": etag, "Cache-Control": cache_control}
    if last_modified is not None:
        headers["Last-Modified"] = format_datetime(as_utc(last_modified), usegmt=True)

    if is_not_modified(request, etag, last_modified):
        return Response(status_code=304, headers=headers)

    for key, value in headers.items():
        response.headers[key] = value
    return None
