# File: /app/core/errors.py | Version: 1.0 | Title: Domain errors rendered as JSON:API error documents
from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """
    Base class for errors that map onto an HTTP status.
    Raised from routers/crud; rendered by app.core.error_handlers.
    """

    status_code: int = 500
    code: str = "internal_error"
    title: str = "Internal Server Error"

    def __init__(self, detail: str, *, title: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if title is not None:
            self.title = title


class BadParameterError(AppError):
    status_code = 400
    code = "bad_parameter"
    title = "Bad Parameter"

    def __init__(self, parameter: str, value: object, reason: Optional[str] = None):
        detail = f"Bad value for parameter '{parameter}': '{value}'"
        if reason:
            detail = f"{detail} ({reason})"
        super().__init__(detail)
        self.parameter = parameter
        self.value = value


class ConversionError(AppError):
    status_code = 400
    code = "conversion_error"
    title = "Conversion Error"


class UnauthorizedError(AppError):
    status_code = 401
    code = "unauthorized"
    title = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"
    title = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    title = "Not Found"

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} with id '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class DataConflictError(AppError):
    status_code = 409
    code = "data_conflict"
    title = "Conflict"


class InternalError(AppError):
    pass
