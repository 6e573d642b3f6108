"""Unit tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient

from docgen.api.deps import attachment_headers
from docgen.core.config import DOCX_MIME_TYPE, Settings
from docgen.main import create_app
from tests.conftest import CONTENT_TYPES_XML, build_package, paragraph_texts


@pytest.fixture
def client():
    """Create a test client around a freshly configured app."""
    app = create_app(Settings(max_template_size_bytes=1024 * 1024))
    return TestClient(app)


def upload(buffer: bytes, filename: str = "lease.docx", content_type: str = DOCX_MIME_TYPE):
    return (filename, buffer, content_type)


# =============================================================================
# Catalog Endpoint Tests
# =============================================================================


class TestCatalogEndpoints:
    """Test suite for health and catalog endpoints."""

    def test_health(self, client):
        """Test the health check."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_variables(self, client):
        """Test the grouped variable catalog."""
        response = client.get("/templates/variables")

        assert response.status_code == 200
        body = response.json()
        assert "tenant" in body["categories"]
        assert any(v["name"] == "tenant_name" for v in body["variables"])

    def test_sample_data(self, client):
        """Test the sample data map."""
        response = client.get("/templates/sample-data")

        assert response.status_code == 200
        assert response.json()["tenant_name"] == "John Smith"


# =============================================================================
# Template Endpoint Tests
# =============================================================================


class TestTemplateEndpoints:
    """Test suite for template endpoints."""

    def test_validate_valid_template(self, client, make_docx):
        """Test validating a template with an unknown variable."""
        buffer = make_docx("{{tenant_name}} {{favorite_color}}")

        response = client.post("/templates/validate", files={"file": upload(buffer)})

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["variables"] == ["favorite_color", "tenant_name"]
        assert body["unknown_variables"] == ["favorite_color"]
        assert "monthly_rent" in body["missing_required"]

    def test_validate_wrong_extension(self, client, make_docx):
        """Test that upload metadata is checked first."""
        response = client.post(
            "/templates/validate", files={"file": upload(make_docx("x"), filename="lease.txt")}
        )

        assert response.status_code == 200
        assert response.json() == {
            "valid": False,
            "error": "Template file must have a .docx extension",
            "warnings": [],
            "variables": [],
            "unknown_variables": [],
            "missing_required": [],
        }

    def test_validate_corrupt_template(self, client):
        """Test that a corrupt upload is reported as invalid."""
        response = client.post("/templates/validate", files={"file": upload(b"not a zip")})

        assert response.status_code == 200
        assert response.json()["error"].startswith("Invalid DOCX file:")

    def test_parse(self, client, make_docx):
        """Test parsing an uploaded template."""
        response = client.post(
            "/templates/parse", files={"file": upload(make_docx("Hi {{tenant_name}}"))}
        )

        assert response.status_code == 200
        assert response.json()["variables"] == ["tenant_name"]

    def test_parse_missing_main_part(self, client):
        """Test that parse failures map to 422 with an error code."""
        buffer = build_package({"[Content_Types].xml": CONTENT_TYPES_XML})

        response = client.post("/templates/parse", files={"file": upload(buffer)})

        assert response.status_code == 422
        assert response.json()["error_code"] == "TEMPLATE_PARSE_FAILED"

    def test_upload_too_large(self, client):
        """Test the configured size limit."""
        response = client.post(
            "/templates/parse", files={"file": upload(b"x" * (1024 * 1024 + 1))}
        )

        assert response.status_code == 413

    def test_preview(self, client):
        """Test a text preview with explicit data."""
        response = client.post(
            "/templates/preview",
            json={"content": "Dear {{tenant_name}} {{unit_number}}", "sample_data": {"tenant_name": "Jane"}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "Dear Jane [unit_number]"
        assert body["missing_variables"] == ["unit_number"]

    def test_preview_uses_sample_data(self, client):
        """Test that catalog samples fill in when no data is sent."""
        response = client.post("/templates/preview", json={"content": "{{tenant_name}}"})

        assert response.json()["content"] == "John Smith"

    def test_render(self, client, make_docx):
        """Test rendering returns a DOCX download."""
        response = client.post(
            "/templates/render",
            files={"file": upload(make_docx("Tenant: {{tenant_name}}"))},
            data={"data": json.dumps({"tenant_name": "Jane"})},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == DOCX_MIME_TYPE
        assert 'filename="lease.docx"' in response.headers["content-disposition"]
        assert paragraph_texts(response.content) == ["Tenant: Jane"]

    def test_render_non_ascii_filename(self, client, make_docx):
        """Test that a non-ASCII upload name still yields a valid download header."""
        response = client.post(
            "/templates/render",
            files={"file": upload(make_docx("{{tenant_name}}"), filename="Mietvertrag_Müller.docx")},
            data={"data": json.dumps({"tenant_name": "Jane"})},
        )

        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert disposition.isascii()
        assert "filename*=UTF-8''Mietvertrag_M" in disposition
        assert paragraph_texts(response.content) == ["Jane"]

    def test_render_rejects_bad_data(self, client, make_docx):
        """Test that the data field must be a JSON object."""
        response = client.post(
            "/templates/render",
            files={"file": upload(make_docx("x"))},
            data={"data": "[1, 2]"},
        )

        assert response.status_code == 422

    def test_render_failure(self, client):
        """Test that render errors map to 500 with an error code."""
        response = client.post("/templates/render", files={"file": upload(b"not a zip")})

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "RENDER_FAILED"
        assert body["detail"].startswith("Failed to render template")


# =============================================================================
# Document Endpoint Tests
# =============================================================================


class TestDocumentEndpoints:
    """Test suite for document endpoints."""

    def test_merge(self, client, make_docx):
        """Test merging uploaded documents in order."""
        files = [
            ("files", upload(make_docx("First"), filename="a.docx")),
            ("files", upload(make_docx("Second"), filename="b.docx")),
        ]

        response = client.post("/documents/merge", files=files)

        assert response.status_code == 200
        texts = [text for text in paragraph_texts(response.content) if text.strip()]
        assert texts == ["First", "Second"]

    def test_merge_nothing(self, client):
        """Test that an empty merge request is a client error."""
        response = client.post("/documents/merge")

        assert response.status_code == 400
        assert response.json()["error_code"] == "NO_DOCUMENTS_TO_MERGE"

    def test_merge_invalid_structure(self, client, make_docx):
        """Test that a document without a body maps to 422 with its index."""
        broken = build_package(
            {"[Content_Types].xml": CONTENT_TYPES_XML, "word/document.xml": "<w:document/>"}
        )
        files = [("files", upload(make_docx("ok"))), ("files", upload(broken))]

        response = client.post("/documents/merge", files=files)

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "INVALID_DOCUMENT_STRUCTURE"
        assert body["extra"] == {"index": 1}

    def test_page_break(self, client, make_docx):
        """Test appending a page break."""
        response = client.post(
            "/documents/page-break", files={"file": upload(make_docx("Body"))}
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == DOCX_MIME_TYPE


# =============================================================================
# Download Header Tests
# =============================================================================


class TestAttachmentHeaders:
    """Test suite for attachment_headers."""

    def test_ascii_name(self):
        """Test that a plain name appears unchanged in both parameters."""
        headers = attachment_headers("lease.docx", "rendered.docx")

        assert headers["Content-Disposition"] == (
            "attachment; filename=\"lease.docx\"; filename*=UTF-8''lease.docx"
        )

    def test_non_ascii_name(self):
        """Test that non-ASCII names get an ASCII fallback and a UTF-8 form."""
        disposition = attachment_headers("Mietvertrag_Müller.docx", "rendered.docx")[
            "Content-Disposition"
        ]

        assert 'filename="Mietvertrag_M_ller.docx"' in disposition
        assert "filename*=UTF-8''Mietvertrag_M%C3%BCller.docx" in disposition
        disposition.encode("latin-1")

    def test_quotes_and_default(self):
        """Test that quotes are neutralised and non-DOCX names use the default."""
        quoted = attachment_headers('a"b.docx', "rendered.docx")["Content-Disposition"]

        assert 'filename="a_b.docx"' in quoted
        assert "filename*=UTF-8''a%22b.docx" in quoted
        assert 'filename="rendered.docx"' in attachment_headers(
            "notes.txt", "rendered.docx"
        )["Content-Disposition"]
