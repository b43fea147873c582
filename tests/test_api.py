"""
API Endpoint Tests for the Stór Publisher service

Run with: pytest tests/test_api.py -v
"""

import io
import json
import zipfile

import pytest
from fastapi.testclient import TestClient

from storpub.api import create_app
from storpub.config import ServiceConfig

from conftest import DOCX_MIME, FakeConverter, core_xml, custom_xml


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def client(converter):
    """Create test client."""
    return TestClient(create_app(ServiceConfig(), converter=converter))


class TestHealthEndpoint:
    """Tests for /api/v1/health endpoint."""

    def test_health_returns_200(self, client):
        """Health endpoint should return 200."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_returns_status(self, client):
        """Health endpoint should include status field."""
        data = client.get("/api/v1/health").json()
        assert data["status"] == "healthy"
        assert data["converter"] == "FakeConverter"


class TestInfoEndpoint:
    """Tests for /api/v1/info and /api/v1/units."""

    def test_info_contains_name_and_version(self, client):
        """Info should contain service name and version."""
        data = client.get("/api/v1/info").json()
        assert data["name"] == "Stór Publisher API"
        assert data["version"] == "1.0.0"

    def test_info_lists_formats(self, client):
        """Info should list every format with its gating."""
        formats = {f["format"]: f for f in client.get("/api/v1/info").json()["formats"]}
        assert set(formats) == {"html", "xml", "docbook", "jsonld"}
        assert formats["docbook"]["gated"] is True
        assert formats["html"]["gated"] is False

    def test_units(self, client):
        units = client.get("/api/v1/units").json()
        assert {"code": "PBO", "title": "Parliamentary Budget Office"} in units


class TestMetadataEndpoints:
    """Tests for metadata validation and contributor parsing."""

    def test_validate_empty(self, client):
        """An empty record fails with errors."""
        data = client.post("/api/v1/metadata/validate", json={"metadata": {}}).json()
        assert data["validation"]["ok"] is False
        assert "Title (min 3 chars)" in data["validation"]["errors"]
        assert data["summary"].startswith("Validation FAILED")

    def test_validate_valid(self, client, valid_metadata):
        data = client.post("/api/v1/metadata/validate", json={"metadata": valid_metadata}).json()
        assert data["validation"]["ok"] is True
        assert data["metadata"]["unit"]["unit"] == "Parliamentary Budget Office"

    def test_parse_contributors(self, client):
        response = client.post("/api/v1/contributors/parse", json={
            "text": "Kelly, Tom|author|COM-FIN; Ann Lee",
            "unit_code": "PBO",
        })
        people = response.json()["contributors"]
        assert people[0]["affiliation"]["committeeCode"] == "COM-FIN"
        assert people[1]["affiliation"]["unitCode"] == "PBO"


class TestImportEndpoint:
    """Tests for /api/v1/import."""

    def test_import(self, client, make_docx):
        """A .docx upload returns HTML, metadata and a validation report."""
        data = make_docx(
            core=core_xml(title="Budget Outlook", creator="Jane Murphy"),
            custom=custom_xml({"UnitCode": "PBO"}),
        )
        response = client.post(
            "/api/v1/import",
            files={"file": ("report.docx", data, DOCX_MIME)},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["html"] == "<h1>Imported</h1><p>Body</p>"
        assert body["metadata"]["title"] == "Budget Outlook"
        assert body["metadata"]["contributors"][0]["family"] == "Murphy"
        assert body["validation"]["ok"] is False

    def test_import_merges_current_metadata(self, client, make_docx):
        current = {"version": "2.0", "contributors": [{"given": "Tom", "family": "Kelly"}]}
        response = client.post(
            "/api/v1/import",
            files={"file": ("report.docx", make_docx(core=core_xml(creator="Jane Murphy")), DOCX_MIME)},
            data={"metadata": json.dumps(current)},
        )
        body = response.json()
        assert body["metadata"]["version"] == "2.0"
        assert [p["family"] for p in body["metadata"]["contributors"]] == ["Kelly", "Murphy"]

    def test_wrong_extension(self, client, make_docx):
        response = client.post("/api/v1/import", files={"file": ("report.pdf", make_docx(), "application/pdf")})
        assert response.status_code == 400

    def test_corrupt_docx(self, client):
        response = client.post("/api/v1/import", files={"file": ("report.docx", b"not a zip", DOCX_MIME)})
        assert response.status_code == 400
        assert "Failed to import .docx" in response.json()["detail"]

    def test_bad_metadata_json(self, client, make_docx):
        response = client.post(
            "/api/v1/import",
            files={"file": ("report.docx", make_docx(), DOCX_MIME)},
            data={"metadata": "{not json"},
        )
        assert response.status_code == 400


class TestExportEndpoints:
    """Tests for /api/v1/export."""

    def test_export_docbook(self, client, sample_tree, valid_metadata):
        response = client.post("/api/v1/export/docbook", json={
            "document": sample_tree,
            "metadata": valid_metadata,
        })
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert 'filename="budget-outlook-2025-v1.0.docbook.xml"' in response.headers["content-disposition"]
        assert b"<article" in response.content

    def test_export_blocked(self, client, sample_tree):
        """Gated formats answer 422 with the validation report."""
        response = client.post("/api/v1/export/xml", json={"document": sample_tree, "metadata": {}})
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["format"] == "xml"
        assert "Version" in detail["validation"]["errors"]

    def test_export_html_not_blocked(self, client, sample_tree):
        response = client.post("/api/v1/export/html", json={"document": sample_tree, "bodyHtml": "<p>Hi</p>"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert b"<p>Hi</p>" in response.content

    def test_unknown_format(self, client):
        response = client.post("/api/v1/export/pdf", json={})
        assert response.status_code == 400

    def test_bundle(self, client, sample_tree, valid_metadata):
        response = client.post("/api/v1/export/bundle", json={
            "document": sample_tree,
            "metadata": valid_metadata,
        })
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="budget-outlook-2025-v1.0.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            assert "manifest.json" in archive.namelist()

    def test_bundle_unknown_format(self, client):
        response = client.post("/api/v1/export/bundle", json={"formats": ["pdf"]})
        assert response.status_code == 400
