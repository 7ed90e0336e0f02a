"""Global exception handlers."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from prd_concierge.core.errors import (
    CompletionRequestFailed,
    DocumentValidationFailed,
    PRDConciergeError,
)

logger = logging.getLogger(__name__)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


def add_exception_handlers(app: FastAPI):
    """Map concierge errors onto JSON responses."""

    @app.exception_handler(CompletionRequestFailed)
    async def completion_failed_handler(request: Request, exc: CompletionRequestFailed):
        logger.error(
            f"Completion request failed after {len(exc.attempts)} attempts",
            extra={"attempts": [a.to_dict() for a in exc.attempts]},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": exc.code,
                "message": exc.message,
                "attempts": [a.to_dict() for a in exc.attempts],
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(DocumentValidationFailed)
    async def document_invalid_handler(request: Request, exc: DocumentValidationFailed):
        logger.error(f"PRD rejected: {exc.errors}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": exc.code,
                "message": exc.message,
                "errors": exc.errors,
                "warnings": exc.warnings,
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(PRDConciergeError)
    async def concierge_error_handler(request: Request, exc: PRDConciergeError):
        logger.error(f"Concierge error {exc.code}: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": exc.code,
                "message": exc.message,
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred",
                "request_id": _request_id(request),
            },
        )
