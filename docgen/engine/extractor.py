"""Template placeholder extraction.

Placeholders are found by text pattern matching over the plain text of the
main document part, not by a markup-aware template parser. This works
because the placeholders are written as ordinary document text and survive
plain-text extraction intact:

    {{name}}        simple substitution (dot-notation allowed: {{tenant.email}})
    {{#name}}       conditional block opener
    {{/name}}       conditional block closer (never collected as a variable)
"""

import logging
import re

from lxml import etree

from docgen.core.exceptions import DocumentEngineError, MalformedPackageError, TemplateParseError
from docgen.engine.models import ParsedTemplate
from docgen.engine.package import MAIN_DOCUMENT_PART, Package

logger = logging.getLogger(__name__)

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
_W_P = f"{{{W_NS}}}p"
_W_T = f"{{{W_NS}}}t"

SIMPLE_VARIABLE_PATTERN = re.compile(r"\{\{(?![#/])([\w.]+)\}\}")
CONDITIONAL_START_PATTERN = re.compile(r"\{\{#(\w+)\}\}")
CONDITIONAL_END_PATTERN = re.compile(r"\{\{/(\w+)\}\}")


def xml_parser() -> etree.XMLParser:
    """Return a fresh parser; lxml parser objects are not thread-safe."""
    return etree.XMLParser(resolve_entities=False, no_network=True)


def extract_variables(content: str) -> list[str]:
    """Extract placeholder names from template text.

    Collects simple substitution names and conditional block names.
    Closers are ignored. Names are opaque strings here.

    Args:
        content: The template text content.

    Returns:
        Unique variable names sorted ascending.
    """
    variables = set(SIMPLE_VARIABLE_PATTERN.findall(content))
    variables.update(CONDITIONAL_START_PATTERN.findall(content))
    return sorted(variables)


def count_conditional_blocks(content: str) -> tuple[int, int]:
    """Return the number of conditional openers and closers in the text."""
    return (
        len(CONDITIONAL_START_PATTERN.findall(content)),
        len(CONDITIONAL_END_PATTERN.findall(content)),
    )


def document_text(xml: bytes) -> str:
    """Return the plain text of a WordprocessingML part.

    Each paragraph contributes one line made of its w:t runs. Text inside
    nested paragraphs (text boxes) belongs to the nested paragraph only.

    Raises:
        MalformedPackageError: If the markup is not well-formed XML.
    """
    try:
        root = etree.fromstring(xml, xml_parser())
    except etree.XMLSyntaxError as e:
        raise MalformedPackageError(f"corrupt markup in {MAIN_DOCUMENT_PART}: {e}") from e

    lines = []
    for paragraph in root.iter(_W_P):
        runs = [
            node.text or ""
            for node in paragraph.iter(_W_T)
            if next(node.iterancestors(_W_P)) is paragraph
        ]
        lines.append("".join(runs))
    return "\n".join(lines)


def get_full_text(package: Package | bytes) -> str:
    """Return the plain text of a package's main document part.

    Raises:
        MalformedPackageError: If the package or its main part is unreadable.
    """
    if not isinstance(package, Package):
        package = Package.open(package)
    return document_text(package.get_part(MAIN_DOCUMENT_PART))


def parse_docx_template(buffer: bytes) -> ParsedTemplate:
    """Parse a DOCX template and extract its content and variables.

    Args:
        buffer: The DOCX file bytes.

    Returns:
        ParsedTemplate with the document text and sorted variable names.

    Raises:
        TemplateParseError: If the buffer cannot be opened or read.
    """
    try:
        package = Package.open(buffer)
        package.require_document_parts()
        raw_text = get_full_text(package)
    except DocumentEngineError as e:
        logger.error(f"Template parsing failed: {e}", exc_info=True)
        raise TemplateParseError(f"Failed to parse DOCX template: {e}") from e

    variables = extract_variables(raw_text)
    logger.info(f"Parsed template: {len(variables)} variables found")

    return ParsedTemplate(content=raw_text, raw_text=raw_text, variables=variables)
