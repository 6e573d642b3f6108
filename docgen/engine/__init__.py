"""Lease document engine.

Validates, parses, previews, renders and merges DOCX lease templates.
"""

from docgen.engine.catalog import (
    STANDARD_VARIABLES,
    build_variable_schema,
    format_variable_value,
    all_variable_names,
    get_available_variable_names,
    get_required_variable_names,
    get_sample_data,
    get_variable_definition,
    validate_variables,
)
from docgen.engine.extractor import extract_variables, parse_docx_template
from docgen.engine.lease_data import (
    LeaseRecord,
    PropertyRecord,
    TenantRecord,
    UnitRecord,
    build_lease_document_data,
    format_lease_document_data,
    generate_lease_document,
)
from docgen.engine.merger import add_page_break, merge_docx_documents
from docgen.engine.models import (
    ParsedTemplate,
    PreviewResult,
    TemplateValidationResult,
    VariableDefinition,
    VariableSchema,
    VariableValidationResult,
)
from docgen.engine.renderer import preview_template, preview_template_content, render_template
from docgen.engine.validator import validate_template_file, validate_template_format

__all__ = [
    "STANDARD_VARIABLES",
    "build_variable_schema",
    "format_variable_value",
    "all_variable_names",
    "get_available_variable_names",
    "get_required_variable_names",
    "get_sample_data",
    "get_variable_definition",
    "validate_variables",
    "extract_variables",
    "parse_docx_template",
    "LeaseRecord",
    "PropertyRecord",
    "TenantRecord",
    "UnitRecord",
    "build_lease_document_data",
    "format_lease_document_data",
    "generate_lease_document",
    "add_page_break",
    "merge_docx_documents",
    "ParsedTemplate",
    "PreviewResult",
    "TemplateValidationResult",
    "VariableDefinition",
    "VariableSchema",
    "VariableValidationResult",
    "preview_template",
    "preview_template_content",
    "render_template",
    "validate_template_file",
    "validate_template_format",
]
