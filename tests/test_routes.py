"""
Integration tests for API routes.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from src.config import settings
from src.hang_tags.batch_packer import BatchPacker
from src.hang_tags.exceptions import ArchiveError
from src.hang_tags.pdf_layout import HangTagRenderer
from src.main import app


class TestServiceRoutes:
    """Tests for health and root endpoints."""

    def test_health_check(self, client):
        """Test health check endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "timestamp" in data

    def test_root_endpoint(self, client, tmp_path, monkeypatch):
        """Test root endpoint without an upload page."""
        monkeypatch.setattr(settings, "static_dir", str(tmp_path))

        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "Hang Tag Service"
        assert data["docs"] == "/docs"

    def test_root_serves_upload_page(self, client, tmp_path, monkeypatch):
        """Test root endpoint serves index.html when deployed."""
        (tmp_path / "index.html").write_text("<html>Hang Tags</html>")
        monkeypatch.setattr(settings, "static_dir", str(tmp_path))

        response = client.get("/")

        assert response.status_code == 200
        assert "Hang Tags" in response.text


class TestGenerateTags:
    """Tests for POST /api/generate-tags."""

    def test_returns_zip_archive(self, client, sample_product, csv_product, read_zip):
        """Test successful batch returns a ZIP attachment."""
        response = client.post(
            "/api/generate-tags",
            json={"products": [sample_product, csv_product]}
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="hang-tags.zip"' in response.headers["content-disposition"]

        entries = read_zip(response.content)
        assert sorted(entries) == ["2853-20-R-hangtag.pdf", "DCD771C2-hangtag.pdf"]

    def test_entries_match_input_identifiers(self, client, read_zip):
        """Test archive never holds more entries than products."""
        products = [{"sku": f"TAG-{i}", "price": i} for i in range(1, 6)]

        response = client.post("/api/generate-tags", json={"products": products})

        entries = read_zip(response.content)
        assert len(entries) <= len(products)
        assert set(entries) <= {f"TAG-{i}-hangtag.pdf" for i in range(1, 6)}

    def test_empty_products_returns_empty_archive(self, client, read_zip):
        """Test empty list is not an error."""
        response = client.post("/api/generate-tags", json={"products": []})

        assert response.status_code == 200
        assert read_zip(response.content) == {}

    def test_options_accepted(self, client, sample_product, read_zip):
        """Test camelCase size options, including numeric strings."""
        response = client.post(
            "/api/generate-tags",
            json={"products": [sample_product], "options": {"titleSize": "13", "priceSize": 30}}
        )

        assert response.status_code == 200
        assert list(read_zip(response.content)) == ["DCD771C2-hangtag.pdf"]

    def test_products_string_is_client_error(self, client):
        """Test products as a string is rejected with 400."""
        with patch.object(BatchPacker, "build_archive") as mock_archive:
            response = client.post("/api/generate-tags", json={"products": "DCD771C2"})

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/json")
        data = response.json()
        assert data["error_code"] == "INVALID_PRODUCTS"
        assert data["message"] == "Invalid products data"
        mock_archive.assert_not_called()

    def test_missing_products_is_client_error(self, client):
        """Test missing products is rejected with 400."""
        response = client.post("/api/generate-tags", json={"options": {}})

        assert response.status_code == 400

    def test_malformed_json_is_client_error(self, client):
        """Test unparseable body is rejected with 400."""
        response = client.post(
            "/api/generate-tags",
            content=b"{not json",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_failed_product_left_out(self, client, sample_product, recon_product, read_zip):
        """Test one failing product still returns 200 with the others."""
        original = HangTagRenderer._render_pdf

        def render_pdf(self, fields, options):
            if fields.identifier == "XFD131":
                raise RuntimeError("simulated drawing failure")
            return original(self, fields, options)

        with patch.object(HangTagRenderer, "_render_pdf", render_pdf):
            response = client.post(
                "/api/generate-tags",
                json={"products": [sample_product, recon_product]}
            )

        assert response.status_code == 200
        assert list(read_zip(response.content)) == ["DCD771C2-hangtag.pdf"]

    def test_archive_failure_is_server_error(self, client, sample_product):
        """Test archive assembly failure returns 500 with the message."""
        with patch.object(BatchPacker, "build_archive", side_effect=ArchiveError("Failed to build hang tag archive: disk full")):
            response = client.post("/api/generate-tags", json={"products": [sample_product]})

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "GENERATION_FAILED"
        assert "disk full" in data["message"]

    def test_oversized_body_rejected(self, client, monkeypatch):
        """Test Content-Length above the limit returns 413."""
        monkeypatch.setattr(settings, "max_request_body_mb", 0)

        response = client.post("/api/generate-tags", json={"products": []})

        assert response.status_code == 413
        assert response.json()["error_code"] == "PAYLOAD_TOO_LARGE"

    def test_chunked_oversized_body_rejected(self, client, monkeypatch):
        """Test a body streamed without Content-Length is still limited."""
        monkeypatch.setattr(settings, "max_request_body_mb", 0)

        def body_chunks():
            yield b'{"products": ['
            yield b'{"sku": "DCD771C2", "price": "99.00"}'
            yield b']}'

        response = client.post(
            "/api/generate-tags",
            content=body_chunks(),
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 413
        assert response.json()["error_code"] == "PAYLOAD_TOO_LARGE"

    def test_chunked_body_within_limit_accepted(self, client, read_zip):
        """Test streamed bodies under the limit still generate tags."""
        def body_chunks():
            yield b'{"products": ['
            yield b'{"sku": "DCD771C2", "price": "99.00"}'
            yield b']}'

        response = client.post(
            "/api/generate-tags",
            content=body_chunks(),
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 200
        assert list(read_zip(response.content)) == ["DCD771C2-hangtag.pdf"]

    def test_error_payloads_share_one_shape(self, client, monkeypatch):
        """Test batch, validation and size errors all return a top-level ErrorResponse."""
        invalid_batch = client.post("/api/generate-tags", json={"products": "oops"})
        invalid_json = client.post(
            "/api/generate-tags",
            content=b"{not json",
            headers={"Content-Type": "application/json"}
        )
        monkeypatch.setattr(settings, "max_request_body_mb", 0)
        too_large = client.post("/api/generate-tags", json={"products": []})

        for response in (invalid_batch, invalid_json, too_large):
            data = response.json()
            assert "detail" not in data
            assert data["status"] == "error"
            assert data["error_code"]
            assert data["message"]

    def test_unexpected_error_is_generation_failed(self, sample_product):
        """Test uncaught errors return 500 GENERATION_FAILED."""
        with patch.object(BatchPacker, "pack", side_effect=RuntimeError("renderer exploded")):
            response = TestClient(app, raise_server_exceptions=False).post(
                "/api/generate-tags",
                json={"products": [sample_product]}
            )

        assert response.status_code == 500
        assert response.json()["error_code"] == "GENERATION_FAILED"
        assert "renderer exploded" in response.json()["message"]

    def test_huge_title_size_falls_back_to_default(self, client, sample_product, read_zip):
        """Test an absurd titleSize still renders every product."""
        response = client.post(
            "/api/generate-tags",
            json={"products": [sample_product], "options": {"titleSize": "9" * 400}}
        )

        assert response.status_code == 200
        assert list(read_zip(response.content)) == ["DCD771C2-hangtag.pdf"]
