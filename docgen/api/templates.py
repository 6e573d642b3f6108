"""Template API routes.

Variable catalog lookup, template validation, parsing, text preview and
full DOCX rendering. Requests are stateless: bytes in, JSON or bytes out.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from docgen.api.deps import attachment_headers, get_app_settings, read_upload
from docgen.api.schemas import (
    ParsedTemplate,
    PreviewRequest,
    PreviewResult,
    TemplateCheckResponse,
    VariableSchema,
)
from docgen.core.config import DOCX_MIME_TYPE, Settings
from docgen.engine.catalog import build_variable_schema, get_sample_data, validate_variables
from docgen.engine.extractor import parse_docx_template
from docgen.engine.renderer import preview_template, render_template
from docgen.engine.validator import validate_template_file, validate_template_format

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


# =============================================================================
# Helper Functions
# =============================================================================


def _parse_data_field(data: str) -> dict[str, Any]:
    """Decode the JSON object sent in the multipart 'data' field.

    Raises:
        HTTPException: 422 if the field is not a JSON object.
    """
    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Field 'data' is not valid JSON: {e}",
        ) from e

    if not isinstance(parsed, dict):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Field 'data' must be a JSON object",
        )
    return parsed


# =============================================================================
# Catalog Endpoints
# =============================================================================


@router.get("/variables", response_model=VariableSchema)
async def get_variables() -> VariableSchema:
    """Return the variable catalog grouped by category."""
    return build_variable_schema()


@router.get("/sample-data")
async def get_template_sample_data() -> dict[str, Any]:
    """Return example values for every catalog variable that has one."""
    return get_sample_data()


# =============================================================================
# Template Endpoints
# =============================================================================


@router.post("/validate", response_model=TemplateCheckResponse)
async def validate_template(
    file: UploadFile,
    settings: Settings = Depends(get_app_settings),
) -> TemplateCheckResponse:
    """Validate an uploaded template.

    Upload metadata is checked first, then the DOCX structure, then the
    variables the template uses against the catalog. Problems are reported
    in the response body; only unreadable uploads raise.

    Args:
        file: The DOCX template.
        settings: Application settings.

    Returns:
        TemplateCheckResponse with the first fatal error or the warnings.
    """
    content = await file.read()
    logger.info(f"Validating template {file.filename} ({len(content)} bytes)")

    upload_check = validate_template_file(
        len(content), file.content_type, file.filename, settings=settings
    )
    if not upload_check.valid:
        return TemplateCheckResponse(valid=False, error=upload_check.error)

    format_check = await run_in_threadpool(validate_template_format, content)
    if not format_check.valid:
        return TemplateCheckResponse(valid=False, error=format_check.error)

    parsed = await run_in_threadpool(parse_docx_template, content)
    variable_check = validate_variables(parsed.variables)

    return TemplateCheckResponse(
        valid=True,
        warnings=format_check.warnings + variable_check.warnings,
        variables=parsed.variables,
        unknown_variables=variable_check.unknown_variables,
        missing_required=variable_check.missing_required,
    )


@router.post("/parse", response_model=ParsedTemplate)
async def parse_template(
    file: UploadFile,
    settings: Settings = Depends(get_app_settings),
) -> ParsedTemplate:
    """Extract the text content and variable names of a template."""
    content = await read_upload(file, settings)
    return await run_in_threadpool(parse_docx_template, content)


@router.post("/preview", response_model=PreviewResult)
async def preview(request: PreviewRequest) -> PreviewResult:
    """Preview template text with sample data substituted.

    Falls back to catalog sample data when none is provided.
    """
    return preview_template(request.content, request.sample_data)


@router.post(
    "/render",
    response_class=Response,
    responses={200: {"content": {DOCX_MIME_TYPE: {}}}},
)
async def render(
    file: UploadFile,
    data: str = Form(default="{}", description="JSON object of template values"),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Render a DOCX template with the given data.

    Args:
        file: The DOCX template.
        data: JSON object mapping variable names to values.
        settings: Application settings.

    Returns:
        The rendered document as a DOCX download.
    """
    values = _parse_data_field(data)
    content = await read_upload(file, settings)

    logger.info(f"Rendering template {file.filename} with {len(values)} values")
    rendered = await run_in_threadpool(render_template, content, values)

    return Response(
        content=rendered,
        media_type=DOCX_MIME_TYPE,
        headers=attachment_headers(file.filename, "rendered.docx"),
    )
