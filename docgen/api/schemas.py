"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization. Engine result
models are re-exported so routes import everything from one place.
"""

from typing import Any

from pydantic import BaseModel, Field

from docgen.engine.models import (
    ParsedTemplate,
    PreviewResult,
    TemplateValidationResult,
    VariableSchema,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ParsedTemplate",
    "PreviewRequest",
    "PreviewResult",
    "TemplateCheckResponse",
    "TemplateValidationResult",
    "VariableSchema",
]


# =============================================================================
# Common Schemas
# =============================================================================


class HealthResponse(BaseModel):
    """Response for the health check endpoint."""

    status: str = "healthy"
    service: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")


# =============================================================================
# Template Schemas
# =============================================================================


class PreviewRequest(BaseModel):
    """Request body for a text-only template preview."""

    content: str = Field(description="Template text, usually from the parse endpoint")
    sample_data: dict[str, Any] | None = Field(
        default=None,
        description="Values to substitute. Catalog sample data is used if omitted.",
    )


class TemplateCheckResponse(BaseModel):
    """Response for the template upload validation endpoint.

    Combines the upload checks, the structural format check and the
    catalog check of the variables the template uses.
    """

    valid: bool
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)
    variables: list[str] = Field(default_factory=list)
    unknown_variables: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
