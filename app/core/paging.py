# File: /app/core/paging.py | Version: 1.0 | Title: page[offset] / page[limit] parsing
from __future__ import annotations

from typing import Optional, Tuple

from app.core.errors import BadParameterError

# Largest value a database LIMIT / OFFSET accepts (signed 64-bit)
MAX_PAGE_VALUE = 2**63 - 1


def _parse_int(name: str, raw: str, minimum: int) -> int:
    try:
        value = int(raw.strip())
    except (AttributeError, ValueError):
        raise BadParameterError(name, raw, "Could not parse paging") from None
    if value < minimum:
        raise BadParameterError(name, raw, f"must be >= {minimum}")
    if value > MAX_PAGE_VALUE:
        raise BadParameterError(name, raw, f"must be <= {MAX_PAGE_VALUE}")
    return value


def parse_page(
    offset: Optional[str],
    limit: Optional[str],
    legacy: Optional[str] = None,
    *,
    default_limit: int = 100,
) -> Tuple[int, int]:
    """
    Returns (start, limit).

    Accepts the JSON:API style `page[offset]` / `page[limit]` and the older
    single `page` parameter: "limit" or "offset,limit".
    """
    start, size = 0, default_limit

    if legacy is not None:
        parts = legacy.split(",")
        if len(parts) == 1:
            size = _parse_int("page", parts[0], 1)
        elif len(parts) == 2:
            start = _parse_int("page", parts[0], 0)
            size = _parse_int("page", parts[1], 1)
        else:
            raise BadParameterError("page", legacy, "Could not parse paging")

    if offset is not None:
        start = _parse_int("page[offset]", offset, 0)
    if limit is not None:
        size = _parse_int("page[limit]", limit, 1)
    return start, size
