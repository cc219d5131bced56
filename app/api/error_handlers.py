"""Exception handlers for the FastAPI app."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    LedgerRejectedError,
    LedgerUnavailableError,
    NotFoundError,
    PreconditionError,
    ReconciliationRequiredError,
    ServiceError,
    StoreUnavailableError,
    UnauthorizedError,
    UnavailableError,
    ValidationError,
)

logger = logging.getLogger("app.api.errors")

_STATUS_BY_ERROR: dict[type[ServiceError], int] = {
    ValidationError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    InvalidStateError: 409,
    ConflictError: 409,
    UnavailableError: 409,
    PreconditionError: 422,
    StoreUnavailableError: 502,
    LedgerRejectedError: 502,
    LedgerUnavailableError: 503,
    ReconciliationRequiredError: 500,
}


def status_for(exc: ServiceError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:  # noqa: WPS430
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(
                "request_failed",
                extra={"path": request.url.path, "error_kind": exc.kind, "detail": str(exc)},
            )
        return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": exc.kind})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(exc.errors()), "error": ValidationError.kind},
        )
