from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.constants import Message
from ...domain.exceptions import (
    AuthError,
    AuthenticationError,
    AuthorizationError,
    DuplicateIdentifierError,
    NotFoundError,
    ValidationError,
)


def status_for(exc: AuthError) -> int:
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, DuplicateIdentifierError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


def error_response(exc: AuthError) -> JSONResponse:
    """Translate a domain error into `{"error": <message>}` with its status."""
    code = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse({"error": str(exc)}, status_code=code, headers=headers)


async def _handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    return error_response(exc)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # routing errors (404, 405) and any HTTPException raised by host routes
    return JSONResponse(
        {"error": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        {"error": Message.INVALID_REQUEST.value},
        status_code=422,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Make every error the app returns use the `{"error": <message>}` body."""
    app.add_exception_handler(AuthError, _handle_auth_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
