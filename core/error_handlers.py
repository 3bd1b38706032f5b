"""Exception handlers that give every failed request the same JSON shape.

    {"error": {"message": ..., "status_code": ..., "details": {...}}}

`details` is omitted when empty. Client errors are logged as warnings,
server errors with their traceback.
"""

from typing import Any, Dict, Iterable, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import AppException, AuthenticationError
from core.logger import get_logger

logger = get_logger("core.error_handlers")

LOCATION_PREFIXES = ("body", "query", "path")


def create_error_response(
    message: str,
    status_code: int = 500,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the error envelope.

    Args:
        message: Error message shown to the client.
        status_code: HTTP status code.
        details: Extra machine-readable information, left out when empty.

    Returns:
        JSONResponse carrying the envelope.
    """
    error: Dict[str, Any] = {"message": message, "status_code": status_code}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into field/message/type entries.

    The leading location segment ("body", "query", "path") is dropped so the
    field names match the JSON the client sent.
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in LOCATION_PREFIXES:
            loc = loc[1:]
        formatted.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        })
    return formatted


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Translate an `AppException` into its status code and message.

    A 401 caused by an expired or unknown session token also tells the
    client to drop that cookie.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)

    response = create_error_response(exc.message, exc.status_code, exc.details)
    if isinstance(exc, AuthenticationError):
        sessions = request.app.state.sessions
        token = request.cookies.get(sessions.cookie_name)
        if token and sessions.get_user_id(token) is None:
            response.delete_cookie(sessions.cookie_name)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 listing the failing fields."""
    errors = format_validation_errors(exc.errors())
    fields = [e["field"] for e in errors]
    logger.warning("%s %s -> invalid fields %s", request.method, request.url.path, fields)

    return create_error_response(
        "Invalid request data",
        status.HTTP_400_BAD_REQUEST,
        {"fields": fields, "validation_errors": errors},
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Hide unexpected failures behind a generic 500; storage errors are tagged as such."""
    kind = "database_error" if isinstance(exc, SQLAlchemyError) else "internal_error"
    logger.error(
        "Unhandled %s on %s %s: %s",
        kind,
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    message = "A database error occurred" if kind == "database_error" else "An internal server error occurred"
    return create_error_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR, {"type": kind})


def register_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, internal_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
