"""FastAPI application entry point.

Application setup with middleware, routing and error mapping.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docgen import __version__
from docgen.api.documents import router as documents_router
from docgen.api.schemas import ErrorResponse, HealthResponse
from docgen.api.templates import router as templates_router
from docgen.core.config import Settings, get_settings
from docgen.core.exceptions import (
    DocumentEngineError,
    InvalidDocumentStructureError,
    MalformedPackageError,
    NoDocumentsToMergeError,
    TemplateParseError,
)
from docgen.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins
_ERROR_STATUS_CODES: tuple[tuple[type[DocumentEngineError], int], ...] = (
    (NoDocumentsToMergeError, status.HTTP_400_BAD_REQUEST),
    (InvalidDocumentStructureError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (MalformedPackageError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (TemplateParseError, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def error_status_code(exc: DocumentEngineError) -> int:
    """Map an engine error to its HTTP status code (500 if unmapped)."""
    for error_class, status_code in _ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Lease template validation, rendering and merging",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(templates_router)
    app.include_router(documents_router)

    @app.get("/health", tags=["health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers and monitoring."""
        return HealthResponse(service=settings.app_name, version=__version__)

    @app.exception_handler(DocumentEngineError)
    async def engine_exception_handler(request: Request, exc: DocumentEngineError):
        """Map engine errors to ErrorResponse bodies."""
        status_code = error_status_code(exc)
        if status_code >= 500:
            logger.error(f"Engine error on {request.url.path}: {exc}")
        else:
            logger.warning(f"Rejected request on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                detail=exc.message,
                error_code=exc.error_code,
                extra=exc.to_extra(),
            ).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Validation error",
                "errors": jsonable_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                detail="Internal server error",
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    logger.info("FastAPI application created successfully")
    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Drop non-serializable context (e.g. exception objects) from errors."""
    return [
        {key: value for key, value in error.items() if key in {"type", "loc", "msg"}}
        for error in exc.errors()
    ]


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        "docgen.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
    )
