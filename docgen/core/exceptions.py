"""Document engine exceptions.

Every fatal condition raised by the engine derives from DocumentEngineError
so the API layer can map it to an ErrorResponse with a stable error code.
Structural warnings are not exceptions; they travel inside a successful
TemplateValidationResult.
"""

from typing import Any


class DocumentEngineError(Exception):
    """Base class for document engine errors.

    Attributes:
        message: Human-readable error message.
        error_code: Application-specific error code.
    """

    error_code = "DOCUMENT_ENGINE_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_extra(self) -> dict[str, Any] | None:
        """Return additional error context for API responses."""
        return None


class MalformedPackageError(DocumentEngineError):
    """Raised when a buffer is not a valid archive or lacks required parts."""

    error_code = "MALFORMED_PACKAGE"


class PartNotFoundError(MalformedPackageError):
    """Raised when a named part is absent from a package."""

    error_code = "PART_NOT_FOUND"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"missing {path}")

    def to_extra(self) -> dict[str, Any] | None:
        return {"path": self.path}


class TemplateParseError(DocumentEngineError):
    """Raised when a template cannot be parsed for variable extraction."""

    error_code = "TEMPLATE_PARSE_FAILED"


class RenderError(DocumentEngineError):
    """Raised when the template engine cannot substitute the given data.

    The engine's own message is kept verbatim in the error message.
    """

    error_code = "RENDER_FAILED"


class MergeError(DocumentEngineError):
    """Raised when merging rendered documents fails."""

    error_code = "MERGE_FAILED"


class InvalidDocumentStructureError(MergeError):
    """Raised when a document body cannot be located.

    Attributes:
        index: Position of the offending document in the merge input.
    """

    error_code = "INVALID_DOCUMENT_STRUCTURE"

    def __init__(self, index: int, message: str | None = None) -> None:
        self.index = index
        super().__init__(message or f"Invalid document structure at index {index}")

    def to_extra(self) -> dict[str, Any] | None:
        return {"index": self.index}


class NoDocumentsToMergeError(MergeError):
    """Raised when merge is called with an empty document list."""

    error_code = "NO_DOCUMENTS_TO_MERGE"

    def __init__(self) -> None:
        super().__init__("No documents to merge")
