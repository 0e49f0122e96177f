"""
Exception handlers that give every error the same JSON shape.

All error bodies carry "message"; validation failures add "errors" keyed by
field name with a list of messages per field.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from employee_portal.core.config import settings
from employee_portal.core.rate_limiter import rate_limit_exceeded_handler

logger = logging.getLogger("employee_portal.errors")

INVALID_DATA_MESSAGE = "The given data was invalid."


class ValidationErrorBody(BaseModel):
    message: str
    errors: Dict[str, List[str]]


class ServerErrorBody(BaseModel):
    message: str
    error: str
    reference_id: str
    timestamp: str
    path: Optional[str] = None


def validation_error_response(errors: Dict[str, List[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ValidationErrorBody(message=INVALID_DATA_MESSAGE, errors=errors).model_dump(),
    )


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by the last element of their location."""
    grouped: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        grouped.setdefault(location[-1] if location else "body", []).append(
            error.get("msg", "Invalid value.")
        )
    return grouped


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return validation_error_response(_field_errors(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last resort for anything the routes didn't handle.

    The full traceback goes to the log under a reference id; the response
    only names the exception when running with DEBUG outside production.
    """
    reference_id = uuid.uuid4().hex[:12]
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path} [ref {reference_id}]",
        exc_info=exc,
    )

    expose = settings.DEBUG and not settings.IS_PRODUCTION
    body = ServerErrorBody(
        message=str(exc) if expose else "Server Error",
        error=type(exc).__name__ if expose else "Internal server error",
        reference_id=reference_id,
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=request.url.path,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
