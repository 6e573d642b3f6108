"""Core configuration, logging and error types."""

from docgen.core.config import Settings, get_settings
from docgen.core.exceptions import (
    DocumentEngineError,
    InvalidDocumentStructureError,
    MalformedPackageError,
    MergeError,
    NoDocumentsToMergeError,
    PartNotFoundError,
    RenderError,
    TemplateParseError,
)

__all__ = [
    "Settings",
    "get_settings",
    "DocumentEngineError",
    "MalformedPackageError",
    "PartNotFoundError",
    "TemplateParseError",
    "RenderError",
    "MergeError",
    "InvalidDocumentStructureError",
    "NoDocumentsToMergeError",
]
