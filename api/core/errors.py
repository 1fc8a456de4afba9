"""
Error taxonomy and the single classifier that turns any failure into a
JSON response.

Services raise the `ApiError` subclasses below; repositories let
`db.StorageError` propagate. `classify()` is the only place where a failure
becomes a status code, and `register_exception_handlers()` wires it into
FastAPI once for every exception family.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import StorageError, StorageErrorKind

logger = logging.getLogger(__name__)

BAD_REQUEST = "bad request"
NOT_FOUND = "not found"
UNPROCESSABLE = "unprocessible entity"
METHOD_NOT_ALLOWED = "method not allowed"
INTERNAL_ERROR = "internal server error"


class ApiError(Exception):
    status_code: int = 500
    default_msg: str = INTERNAL_ERROR

    def __init__(self, msg: str | None = None) -> None:
        self.msg = msg or self.default_msg
        super().__init__(self.msg)


class ValidationError(ApiError):
    """Malformed query, body or identifier."""

    status_code = 400
    default_msg = BAD_REQUEST


class NotFoundError(ApiError):
    """The primary resource, or the entity a filter points at, is absent."""

    status_code = 404
    default_msg = NOT_FOUND

    @classmethod
    def entity(cls, name: str) -> "NotFoundError":
        return cls(f"{name} does not exist")


class ReferentialError(ApiError):
    """A write referenced a row that does not exist."""

    status_code = 422
    default_msg = UNPROCESSABLE


class MethodNotSupportedError(ApiError):
    status_code = 405
    default_msg = METHOD_NOT_ALLOWED


class RouteNotFoundError(ApiError):
    status_code = 404
    default_msg = NOT_FOUND


@dataclass(frozen=True)
class Outcome:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] | None = None


_STORAGE_ERRORS: dict[StorageErrorKind, type[ApiError]] = {
    StorageErrorKind.TYPE_MISMATCH: ValidationError,
    StorageErrorKind.UNDEFINED_COLUMN: ValidationError,
    StorageErrorKind.NOT_NULL_VIOLATION: ValidationError,
    StorageErrorKind.FOREIGN_KEY_VIOLATION: ReferentialError,
}


def _outcome(err: ApiError) -> Outcome:
    return Outcome(status_code=err.status_code, body={"msg": err.msg})


def classify(exc: BaseException) -> Outcome:
    """
    Map any failure onto a status code and a `{"msg": ...}` body.

    Specific families are checked before the 500 fallback.
    """
    if isinstance(exc, ApiError):
        return _outcome(exc)

    if isinstance(exc, StorageError):
        api_error = _STORAGE_ERRORS.get(exc.kind)
        if api_error is not None:
            return _outcome(api_error())
        return Outcome(status_code=500, body={"msg": INTERNAL_ERROR})

    if isinstance(exc, RequestValidationError):
        return _outcome(ValidationError())

    if isinstance(exc, StarletteHTTPException):
        if exc.status_code == 404:
            return _outcome(RouteNotFoundError())
        if exc.status_code == 405:
            # Keep the Allow header Starlette computed for the path.
            return replace(_outcome(MethodNotSupportedError()), headers=dict(exc.headers or {}) or None)
        return Outcome(status_code=exc.status_code, body={"msg": str(exc.detail).lower()})

    return Outcome(status_code=500, body={"msg": INTERNAL_ERROR})


def to_response(outcome: Outcome) -> JSONResponse:
    return JSONResponse(status_code=outcome.status_code, content=outcome.body, headers=outcome.headers)


async def _handle(request: Request, exc: Exception) -> JSONResponse:
    outcome = classify(exc)
    if outcome.status_code >= 500:
        logger.exception(
            "request_failed method=%s path=%s", request.method, request.url.path, exc_info=exc
        )
    else:
        logger.debug(
            "request_rejected method=%s path=%s status=%s msg=%s",
            request.method,
            request.url.path,
            outcome.status_code,
            outcome.body.get("msg"),
        )
    return to_response(outcome)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type in (ApiError, StorageError, RequestValidationError, StarletteHTTPException, Exception):
        app.add_exception_handler(exc_type, _handle)
