"""Shared fixtures for building DOCX packages in memory."""

import io
import zipfile

import pytest
from docx import Document

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

CONTENT_TYPES_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-'
    'officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)

PACKAGE_RELS_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/'
    'relationships/officeDocument" Target="word/document.xml"/>'
    "</Relationships>"
)


def document_xml(body: str) -> str:
    """Wrap body markup in a minimal main document part."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body}</w:body></w:document>'
    )


def paragraph_xml(*runs: str) -> str:
    """Build a paragraph with one run per text fragment."""
    return "<w:p>" + "".join(f"<w:r><w:t>{text}</w:t></w:r>" for text in runs) + "</w:p>"


def build_package(parts: dict[str, str | bytes]) -> bytes:
    """Zip the given parts into a package buffer."""
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path, data in parts.items():
            archive.writestr(path, data)
    return output.getvalue()


def read_part(buffer: bytes, path: str) -> str:
    """Return a part of a package buffer decoded as UTF-8."""
    with zipfile.ZipFile(io.BytesIO(buffer)) as archive:
        return archive.read(path).decode("utf-8")


def paragraph_texts(buffer: bytes) -> list[str]:
    """Return the paragraph texts python-docx sees in a DOCX buffer."""
    return [paragraph.text for paragraph in Document(io.BytesIO(buffer)).paragraphs]


@pytest.fixture
def make_docx():
    """Factory building a real DOCX (via python-docx) from paragraph texts."""

    def _make(*paragraphs: str) -> bytes:
        document = Document()
        for text in paragraphs:
            document.add_paragraph(text)
        output = io.BytesIO()
        document.save(output)
        return output.getvalue()

    return _make


@pytest.fixture
def make_package():
    """Factory building a minimal package around raw body markup."""

    def _make(body: str, extra_parts: dict[str, str | bytes] | None = None) -> bytes:
        parts: dict[str, str | bytes] = {
            "[Content_Types].xml": CONTENT_TYPES_XML,
            "_rels/.rels": PACKAGE_RELS_XML,
            "word/document.xml": document_xml(body),
        }
        parts.update(extra_parts or {})
        return build_package(parts)

    return _make
