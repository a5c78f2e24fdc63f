# todo_api/core/errors.py
"""
Erros de domínio da API.

Todos herdam de ``HTTPException`` para que as rotas possam simplesmente
levantá-los; os handlers em ``todo_api.main`` convertem qualquer um deles
(e também os erros do framework/banco) no corpo uniforme ``{"message": ...}``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[dict[str, str]] = None):
        super().__init__(status_code=type(self).status_code, detail=message or type(self).message, headers=headers)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class Conflict(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User already exists"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class InvalidToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid refresh token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class TooManyRequests(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Too many requests, please try again later"


def error_body(message: str) -> dict[str, str]:
    return {"message": message}


def _first_validation_message(errors: list[dict[str, Any]]) -> str:
    if not errors:
        return ValidationError.message
    err = errors[0]
    # "body", "query"... não interessam ao cliente
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    msg = err.get("msg", ValidationError.message)
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def _integrity_message(exc: IntegrityError) -> str:
    text = str(getattr(exc, "orig", exc)).lower()
    if "foreign key" in text:
        return "Referenced entity does not exist"
    return "Duplicate field value entered"


# ---------- handlers ----------
def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=getattr(exc, "headers", None))


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(_first_validation_message(exc.errors())))


def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("integrity error on %s %s: %s", request.method, request.url.path, getattr(exc, "orig", exc))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(_integrity_message(exc)))


def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body("Server Error"))
