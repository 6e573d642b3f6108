"""DOCX template format validation.

Checks an uploaded buffer for the parts every DOCX needs, confirms the
document model loads, and reports structural warnings about placeholders.
Validation only reads the buffer; it never mutates it.
"""

import io
import logging

from docx import Document

from docgen.core.config import Settings, get_settings
from docgen.core.exceptions import DocumentEngineError
from docgen.engine.extractor import count_conditional_blocks, extract_variables, get_full_text
from docgen.engine.models import TemplateValidationResult
from docgen.engine.package import Package

logger = logging.getLogger(__name__)

NO_VARIABLES_WARNING = (
    "No template variables found. Templates should contain variables like {{tenant_name}}."
)


def validate_template_format(buffer: bytes) -> TemplateValidationResult:
    """Validate DOCX template format and structure.

    Args:
        buffer: The DOCX file bytes.

    Returns:
        TemplateValidationResult. Fatal problems set valid=False with an
        error; placeholder problems are returned as warnings.
    """
    warnings: list[str] = []

    try:
        package = Package.open(buffer)
        package.require_document_parts()
        _load_document_model(buffer)
        content = get_full_text(package)
    except DocumentEngineError as e:
        logger.warning(f"Template rejected: {e}")
        return TemplateValidationResult(valid=False, error=f"Invalid DOCX file: {e}")

    variables = extract_variables(content)
    if not variables:
        warnings.append(NO_VARIABLES_WARNING)

    openers, closers = count_conditional_blocks(content)
    if openers != closers:
        warnings.append(
            f"Unbalanced conditional blocks: {openers} opening, {closers} closing."
        )

    logger.info(
        f"Template validated: {len(variables)} variables, {len(warnings)} warnings"
    )
    return TemplateValidationResult(valid=True, warnings=warnings)


def _load_document_model(buffer: bytes) -> None:
    """Make sure python-docx can build a document model from the package.

    Raises:
        DocumentEngineError: If the document model cannot be constructed.
    """
    try:
        Document(io.BytesIO(buffer))
    except Exception as e:
        raise DocumentEngineError(f"unreadable document ({e})") from e


def validate_template_file(
    size: int,
    mime_type: str | None,
    filename: str | None,
    settings: Settings | None = None,
) -> TemplateValidationResult:
    """Validate upload metadata before the file content is inspected.

    Args:
        size: Upload size in bytes.
        mime_type: Declared content type of the upload.
        filename: Original filename.
        settings: Application settings. If None, uses global settings.

    Returns:
        TemplateValidationResult with the first problem found, if any.
    """
    settings = settings or get_settings()

    if size > settings.max_template_size_bytes:
        limit_mb = settings.max_template_size_bytes / 1024 / 1024
        return TemplateValidationResult(
            valid=False,
            error=f"Template file size exceeds maximum of {limit_mb:g}MB",
        )

    if mime_type not in settings.allowed_template_mime_types:
        return TemplateValidationResult(
            valid=False,
            error=(
                f"Template file type {mime_type} is not allowed. "
                "Only DOCX files are supported."
            ),
        )

    if not filename or not filename.lower().endswith(".docx"):
        return TemplateValidationResult(
            valid=False,
            error="Template file must have a .docx extension",
        )

    return TemplateValidationResult(valid=True)
