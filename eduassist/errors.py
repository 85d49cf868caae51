"""Domain exceptions and the app-wide exception handlers.

Every error response shares one body shape::

    {"message": "...", "code": 404, "details": {...}}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eduassist.config import sanitize_error
from eduassist.messages import t

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """An external service (LLM, billing provider) failed.

    ``message`` is already localized and safe to show to the end user;
    the original exception is kept on ``__cause__`` for logging only.
    """

    def __init__(self, message: str, *, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class AIGatewayError(UpstreamError):
    """The LLM call failed or could not be completed."""


class PaymentGatewayError(UpstreamError):
    """The billing provider rejected or failed a request."""


class InvalidTicketTransition(Exception):
    """A support ticket cannot move from its current status to the requested one."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"{current} -> {requested}")
        self.current = current
        self.requested = requested


def create_error_response(status_code: int, message: str, details: Any | None = None) -> dict:
    response = {
        "message": message,
        "code": status_code,
    }
    if details is not None:
        response["details"] = details
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handles FastAPI/Starlette HTTPException."""
    logger.warning("HTTP %s - %s for %s %s", exc.status_code, exc.detail, request.method, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation problems as 400 with per-field details."""
    logger.warning("Validation error: %s for %s %s", exc.errors(), request.method, request.url.path)
    error_details = []
    for error in exc.errors():
        field = ".".join(map(str, error["loc"]))
        error_details.append(f"Field '{field}': {error['msg']}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=create_error_response(
            status.HTTP_400_BAD_REQUEST,
            t("validation_failed"),
            details={"errors": error_details},
        ),
    )


async def ticket_transition_handler(request: Request, exc: InvalidTicketTransition):
    logger.warning("Rejected ticket transition %s for %s", exc, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=create_error_response(
            status.HTTP_400_BAD_REQUEST,
            t("invalid_ticket_transition"),
            details={"current": exc.current, "requested": exc.requested},
        ),
    )


async def upstream_exception_handler(request: Request, exc: UpstreamError):
    """Upstream failures: log the cause, return only the localized message."""
    logger.error(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.__cause__ or exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            exc.message,
            details=exc.details,
        ),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handles any other unhandled exceptions."""
    logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            sanitize_error(exc, generic_message=t("internal_error")),
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidTicketTransition, ticket_transition_handler)
    app.add_exception_handler(UpstreamError, upstream_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
