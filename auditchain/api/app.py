"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from auditchain import __version__
from auditchain.api.dependencies import get_settings, reset_dependencies
from auditchain.api.exceptions import AuditAPIError
from auditchain.api.models.errors import ErrorCode, ErrorDetail, ErrorResponse
from auditchain.api.routes import register_routes
from auditchain.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Close the audit log's store on shutdown."""
    yield
    await reset_dependencies()
    logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    - Structured logging from observability settings
    - CORS middleware
    - Global exception handlers
    - All API routes registered
    """
    settings = get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    app = FastAPI(
        title="auditchain",
        description="Tamper-evident audit log for assistant queries, outcomes and escalations",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    register_routes(app, settings.observability.metrics)

    logger.info(
        "app_created",
        debug=settings.debug,
        audit_backend=settings.audit.backend,
    )

    return app


def _error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    details: list[ErrorDetail] | None = None,
) -> JSONResponse:
    body = ErrorResponse.build(code, message, details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _validation_details(errors: Sequence[Any]) -> list[ErrorDetail]:
    return [
        ErrorDetail(field=".".join(str(part) for part in error["loc"]), message=error["msg"])
        for error in errors
    ]


def _register_exception_handlers(app: FastAPI) -> None:
    """Map exceptions onto the ErrorResponse envelope."""

    @app.exception_handler(AuditAPIError)
    async def audit_api_error_handler(request: Request, exc: AuditAPIError) -> JSONResponse:
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc.status_code, exc.error_code, exc.message)

    # Malformed bodies and event payloads that fail their own validators
    # are both client errors
    @app.exception_handler(RequestValidationError)
    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError | ValidationError
    ) -> JSONResponse:
        logger.warning("validation_error", path=request.url.path, error_count=len(exc.errors()))
        return _error_response(
            400,
            ErrorCode.INVALID_REQUEST,
            "Request validation failed",
            _validation_details(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unexpected_error",
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")


# Module-level instance for `uvicorn auditchain.api.app:app`
app = create_app()
