"""Translate domain exceptions into HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from credit_service.domain.exceptions import (
    ConflictError,
    DomainException,
    InvalidState,
    NotFound,
    UpstreamUnavailable,
    ValidationError,
)

STATUS_BY_EXCEPTION = {
    NotFound: 404,
    ValidationError: 400,
    InvalidState: 409,
    ConflictError: 409,
    UpstreamUnavailable: 503,
}


def _handler(status_code: int):
    async def handle(request: Request, exc: DomainException) -> JSONResponse:
        log = logging.error if status_code >= 500 else logging.warning
        log(
            f"{type(exc).__name__}: {exc}",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "path": request.url.path,
                "status": status_code,
            },
        )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handle


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type, status_code in STATUS_BY_EXCEPTION.items():
        app.add_exception_handler(exc_type, _handler(status_code))
