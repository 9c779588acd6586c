# File: /app/core/error_handlers.py | Version: 2.0 | Title: JSON:API Error Handlers
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError
from app.schemas.jsonapi import JSONAPIResponse

logger = logging.getLogger(__name__)

_CODE_MAP = {
    400: ("bad_request", "Bad Request"),
    401: ("unauthorized", "Unauthorized"),
    403: ("forbidden", "Forbidden"),
    404: ("not_found", "Not Found"),
    405: ("method_not_allowed", "Method Not Allowed"),
    409: ("data_conflict", "Conflict"),
    422: ("unprocessable_entity", "Unprocessable Entity"),
    500: ("internal_error", "Internal Server Error"),
}


def error_document(
    status: int, detail: str, *, code: Optional[str] = None, title: Optional[str] = None
) -> dict:
    default_code, default_title = _CODE_MAP.get(status, ("error", "Error"))
    return {
        "errors": [
            {
                "id": str(uuid.uuid4()),
                "code": code or default_code,
                "status": str(status),
                "title": title or default_title,
                "detail": detail,
            }
        ]
    }


def json_error_response(
    status: int,
    detail: str,
    *,
    code: Optional[str] = None,
    title: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONAPIResponse:
    return JSONAPIResponse(
        status_code=status,
        content=error_document(status, detail, code=code, title=title),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_exc(_req: Request, exc: AppError):
        return json_error_response(
            exc.status_code, exc.detail, code=exc.code, title=exc.title
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc(_req: Request, exc: StarletteHTTPException):
        return json_error_response(
            exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exc(_req: Request, exc: RequestValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err.get('msg')}")
        return json_error_response(400, "; ".join(parts) or "Validation error")

    @app.exception_handler(Exception)
    async def _unhandled(req: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", req.method, req.url.path)
        # Avoid leaking internals
        return json_error_response(500, "Internal server error")
