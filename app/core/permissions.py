# File: /app/core/permissions.py | Version: 2.0 | Title: Space ownership checks
from __future__ import annotations

import logging
from typing import Any, Optional

from app.core.errors import ForbiddenError, UnauthorizedError
from app.models.core_entities import Space

logger = logging.getLogger(__name__)


def is_space_owner(space: Space, identity_id: Optional[Any]) -> bool:
    if identity_id is None or space.owner_id is None:
        return False
    return str(space.owner_id) == str(identity_id)


def require_space_owner(
    space: Space,
    identity_id: Optional[Any],
    message: Optional[str] = None,
) -> None:
    """
    Enforce that `identity_id` owns `space`.
    Raises 401 without an identity and 403 for anyone but the owner.
    """
    if identity_id is None:
        raise UnauthorizedError("missing authenticated identity")
    if not is_space_owner(space, identity_id):
        logger.warning(
            "user is not the space owner",
            extra={
                "space_id": str(space.id),
                "space_owner": str(space.owner_id),
                "current_user": str(identity_id),
            },
        )
        raise ForbiddenError(message or "user is not the space owner")
