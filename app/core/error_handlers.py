"""
Centralized error-to-response mapping.

`to_error_response` is a pure function from any exception to the response
descriptor the client sees; `register_exception_handlers` wires it into the
FastAPI app so no route writes its own error response.

Security:
- Unknown errors are logged with their stack trace server-side
- Clients only ever see a generic message for 500 errors
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppError, ErrorKind, ValidationError
from app.middleware.security import SECURITY_HEADERS

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "Route does not exist"
UNKNOWN_ERROR_MESSAGE = "Something went wrong, try again later"


@dataclass(frozen=True)
class ErrorResponse:
    """What the client receives for a failed request."""
    status_code: int
    msg: str
    kind: ErrorKind = ErrorKind.UNKNOWN
    errors: Optional[List[Dict[str, str]]] = None

    def content(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"msg": self.msg}
        if self.errors:
            body["errors"] = self.errors
        return body

    def headers(self) -> Optional[Dict[str, str]]:
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            return {"WWW-Authenticate": "Bearer"}
        # 500s are rendered by ServerErrorMiddleware, outside SecurityHeadersMiddleware
        if self.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            return dict(SECURITY_HEADERS)
        return None


def _field_name(loc: Sequence[Any]) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts in front of field paths
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts)


def validation_error_from_request(exc: RequestValidationError) -> ValidationError:
    """Convert FastAPI's request validation failure into our ValidationError."""
    errors = []
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value"))
        # pydantic prefixes custom validator messages with "Value error, "
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": _field_name(error.get("loc", ())), "message": message})

    summary = ", ".join(f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors)
    return ValidationError(summary or None, errors=errors)


def to_error_response(exc: Exception) -> ErrorResponse:
    """
    Map an exception to a client-facing response descriptor.

    Pure: no logging, no I/O.
    """
    if isinstance(exc, RequestValidationError):
        exc = validation_error_from_request(exc)

    if isinstance(exc, AppError):
        return ErrorResponse(
            status_code=exc.status_code,
            msg=exc.message,
            kind=exc.kind,
            errors=exc.errors,
        )

    if isinstance(exc, StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return ErrorResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                msg=ROUTE_NOT_FOUND_MESSAGE,
                kind=ErrorKind.NOT_FOUND,
            )
        return ErrorResponse(status_code=exc.status_code, msg=str(exc.detail))

    return ErrorResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        msg=UNKNOWN_ERROR_MESSAGE,
    )


def _json_response(error: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.content(),
        headers=error.headers(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        error = to_error_response(exc)
        logger.warning(
            f"{error.kind.value} on {request.method} {request.url.path}: {error.msg}"
        )
        return _json_response(error)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = to_error_response(exc)
        logger.info(f"Validation failed on {request.method} {request.url.path}: {error.msg}")
        return _json_response(error)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unmatched routes end up here with a 404 from the router
        return _json_response(to_error_response(exc))

    @app.exception_handler(Exception)
    async def unknown_exception_handler(request: Request, exc: Exception):
        # Full details stay in the server log
        logger.exception(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}"
        )
        return _json_response(to_error_response(exc))
