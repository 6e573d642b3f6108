"""DOCX document merging.

Concatenates the bodies of several rendered documents into the first one,
separated by page breaks. The first document supplies styles, numbering,
headers and footers for the result.
"""

import logging
import re
from collections.abc import Sequence

from docgen.core.exceptions import (
    DocumentEngineError,
    InvalidDocumentStructureError,
    MergeError,
    NoDocumentsToMergeError,
)
from docgen.engine.package import DOCUMENT_RELS_PART, MAIN_DOCUMENT_PART, MEDIA_PREFIX, Package

logger = logging.getLogger(__name__)

PAGE_BREAK_XML = '<w:p><w:r><w:br w:type="page"/></w:r></w:p>'

_BODY_PATTERN = re.compile(r"<w:body\b[^>]*>(.*)</w:body>", re.DOTALL)

# Body-level section properties; always the last child of w:body
_TRAILING_SECTION_PATTERN = re.compile(
    r"(?:<w:sectPr\b(?:(?!<w:sectPr\b).)*?</w:sectPr>|<w:sectPr\b[^>]*/>)\s*$",
    re.DOTALL,
)


def _find_body(xml: str, index: int) -> re.Match:
    match = _BODY_PATTERN.search(xml)
    if match is None:
        raise InvalidDocumentStructureError(index)
    return match


def _split_section_properties(body: str) -> tuple[str, str]:
    """Split a body into its content and its trailing w:sectPr, if any."""
    match = _TRAILING_SECTION_PATTERN.search(body)
    if match is None:
        return body, ""
    return body[: match.start()], match.group(0).strip()


def merge_docx_documents(buffers: Sequence[bytes]) -> bytes:
    """Merge multiple DOCX documents into one.

    The body of every document after the first is appended to the first
    document's body with a page break between each pair. Section properties
    of the appended documents are dropped so the merged document keeps the
    page layout of the first one. Media files are copied when their name is
    not already taken.

    Args:
        buffers: DOCX documents in merge order.

    Returns:
        The merged DOCX bytes. A single input is returned unchanged.

    Raises:
        NoDocumentsToMergeError: If buffers is empty.
        InvalidDocumentStructureError: If a document has no body.
        MergeError: If any document cannot be read.
    """
    if not buffers:
        raise NoDocumentsToMergeError()
    if len(buffers) == 1:
        return buffers[0]

    logger.info(f"Merging {len(buffers)} documents")

    try:
        base = Package.open(buffers[0])
        base_xml = base.get_text(MAIN_DOCUMENT_PART)
        base_match = _find_body(base_xml, 0)
        base_content, section_properties = _split_section_properties(base_match.group(1))

        segments = [base_content]
        for index, buffer in enumerate(buffers[1:], start=1):
            package = Package.open(buffer)
            body = _find_body(package.get_text(MAIN_DOCUMENT_PART), index).group(1)
            content, _ = _split_section_properties(body)
            segments.append(content)

            copied = _copy_media(package, base)
            if copied:
                logger.debug(f"Copied {copied} media files from document {index}")
            if package.has_part(DOCUMENT_RELS_PART):
                # Relationship ids in the appended body still point at the
                # source table; images and hyperlinks there are not rewired.
                logger.debug(f"Skipped relationship table of document {index}")

        combined = PAGE_BREAK_XML.join(segments) + section_properties
        merged_xml = (
            base_xml[: base_match.start()]
            + f"<w:body>{combined}</w:body>"
            + base_xml[base_match.end():]
        )
        base.set_part(MAIN_DOCUMENT_PART, merged_xml)
        output = base.serialize()
    except InvalidDocumentStructureError:
        raise
    except (DocumentEngineError, UnicodeDecodeError) as e:
        logger.error(f"Document merge failed: {e}", exc_info=True)
        message = e.message if isinstance(e, DocumentEngineError) else str(e)
        raise MergeError(f"Failed to merge documents: {message}") from e

    logger.info(f"Merged {len(buffers)} documents ({len(output)} bytes)")
    return output


def _copy_media(source: Package, target: Package) -> int:
    """Copy media parts missing from target. Returns the number copied."""
    copied = 0
    for path in source.list_parts(MEDIA_PREFIX):
        if not target.has_part(path):
            target.set_part(path, source.get_part(path))
            copied += 1
    return copied


def add_page_break(buffer: bytes) -> bytes:
    """Append a page break paragraph to the end of a document body.

    The break is placed before the body-level section properties so the
    document stays schema-valid.

    Raises:
        InvalidDocumentStructureError: If the document has no body.
        MergeError: If the document cannot be read.
    """
    try:
        package = Package.open(buffer)
        xml = package.get_text(MAIN_DOCUMENT_PART)
        match = _find_body(xml, 0)
        content, section_properties = _split_section_properties(match.group(1))

        body_start = xml.index(">", match.start()) + 1
        updated = (
            xml[:body_start]
            + content
            + PAGE_BREAK_XML
            + section_properties
            + xml[match.end(1):]
        )
        package.set_part(MAIN_DOCUMENT_PART, updated)
        return package.serialize()
    except InvalidDocumentStructureError:
        raise
    except (DocumentEngineError, UnicodeDecodeError) as e:
        logger.error(f"Adding page break failed: {e}", exc_info=True)
        message = e.message if isinstance(e, DocumentEngineError) else str(e)
        raise MergeError(f"Failed to add page break: {message}") from e
