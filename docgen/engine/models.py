"""Document engine domain models.

Pydantic models shared by the catalog, extractor, validator and the API
layer. These models live here to avoid circular imports with the API layer.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

VariableCategory = Literal[
    "tenant",
    "property",
    "unit",
    "lease",
    "financial",
    "compliance",
    "pet",
    "parking",
    "utilities",
]

VariableType = Literal["string", "number", "date", "boolean", "currency"]

# Ordered; drives the grouping order of VariableSchema.categories
VARIABLE_CATEGORIES: tuple[str, ...] = (
    "tenant",
    "property",
    "unit",
    "lease",
    "financial",
    "compliance",
    "pet",
    "parking",
    "utilities",
)


class VariableDefinition(BaseModel):
    """A placeholder name known to the system."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Unique token identifier")
    description: str = Field(description="What the variable holds")
    type: VariableType = Field(description="Semantic value type")
    category: VariableCategory = Field(description="Catalog grouping")
    format: str | None = Field(default=None, description="Display format hint")
    required: bool = Field(default=False, description="Expected in a main lease template")
    example: str | int | float | bool | None = Field(
        default=None, description="Type-appropriate sample value"
    )


class VariableSchema(BaseModel):
    """All catalog definitions plus the same definitions grouped by category."""

    variables: list[VariableDefinition]
    categories: dict[str, list[VariableDefinition]]


class VariableValidationResult(BaseModel):
    """Outcome of checking a template's variables against the catalog.

    Informational only: rendering is never blocked by unknown or missing
    variables since missing values degrade to bracketed placeholders.
    """

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    unknown_variables: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)


class ParsedTemplate(BaseModel):
    """Text content and placeholder names of a DOCX template."""

    content: str = Field(description="Full plain text of the main document part")
    raw_text: str = Field(description="Same as content; kept for API compatibility")
    variables: list[str] = Field(description="Sorted unique placeholder names")


class TemplateValidationResult(BaseModel):
    """Outcome of a structural template check."""

    valid: bool
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)


class PreviewResult(BaseModel):
    """Text-only preview of a template and the variables it resolved."""

    content: str
    used_variables: list[str] = Field(default_factory=list)
    missing_variables: list[str] = Field(default_factory=list)
