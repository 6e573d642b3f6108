"""Lease document generation engine and HTTP service."""

from docgen.engine import (
    LeaseRecord,
    PropertyRecord,
    TenantRecord,
    UnitRecord,
    add_page_break,
    build_lease_document_data,
    build_variable_schema,
    extract_variables,
    format_lease_document_data,
    format_variable_value,
    generate_lease_document,
    get_sample_data,
    merge_docx_documents,
    parse_docx_template,
    preview_template,
    preview_template_content,
    render_template,
    validate_template_format,
    validate_variables,
)

__version__ = "0.1.0"

__all__ = [
    "LeaseRecord",
    "PropertyRecord",
    "TenantRecord",
    "UnitRecord",
    "add_page_break",
    "build_lease_document_data",
    "build_variable_schema",
    "extract_variables",
    "format_lease_document_data",
    "format_variable_value",
    "generate_lease_document",
    "get_sample_data",
    "merge_docx_documents",
    "parse_docx_template",
    "preview_template",
    "preview_template_content",
    "render_template",
    "validate_template_format",
    "validate_variables",
]
