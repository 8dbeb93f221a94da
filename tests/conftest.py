"""
Pytest configuration and fixtures.
"""

import io
import zipfile

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader

from src.main import app


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def sample_product():
    """Product in Shopify API shape."""
    return {
        "sku": "DCD771C2",
        "handle": "dewalt-20v-max-drill-driver-kit",
        "title": "20V MAX Cordless Drill/Driver Kit",
        "vendor": "DeWalt",
        "price": "99.00",
        "compare_at_price": "149.00",
        "tags": ["Drills", "Kits"],
        "body_html": "<p>Compact drill.</p><p>INCLUDES: Drill, 2 Batteries, Charger and Bag</p>"
    }


@pytest.fixture
def csv_product():
    """Product in Shopify CSV export shape."""
    return {
        "Handle": "milwaukee-m18-impact-driver",
        "Title": "M18 FUEL 1/4\" Hex Impact Driver",
        "Vendor": "Milwaukee",
        "Variant SKU": "2853-20-R",
        "Variant Price": "89.99",
        "Variant Compare At Price": "",
        "Tags": "Impact Drivers, Recon",
        "Body (HTML)": "<p>Tool only.</p>"
    }


@pytest.fixture
def recon_product():
    """Reconditioned product flagged by tag."""
    return {
        "sku": "XFD131",
        "title": "18V LXT Brushless Drill Kit",
        "vendor": "Makita",
        "price": 119.0,
        "tags": ["Recon"]
    }


def pdf_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF."""
    reader = PdfReader(io.BytesIO(pdf_bytes))
    return "\n".join(page.extract_text() for page in reader.pages)


def zip_entries(archive_bytes: bytes) -> dict[str, bytes]:
    """Read a ZIP archive into {filename: bytes}."""
    with zipfile.ZipFile(io.BytesIO(archive_bytes)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


@pytest.fixture
def read_pdf_text():
    """Helper fixture: PDF bytes -> extracted text."""
    return pdf_text


@pytest.fixture
def read_zip():
    """Helper fixture: ZIP bytes -> {filename: bytes}."""
    return zip_entries
