"""Translation of domain errors into HTTP responses."""

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from warden.domain.error import DomainError


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Serialize a domain error as ``{"detail": message}`` with its status."""
    if exc.status_code >= 500:
        logfire.error(
            "Request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    """Register domain error handlers on the application."""
    app.add_exception_handler(DomainError, domain_error_handler)
