import io
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docintake.classification.models import RuleTable
from docintake.classification.rule_loader import load_rule_table

INVOICE_TEXT = (
    "Invoice INV-2024-031 issued to Acme Corporation for consulting services "
    "rendered during March. Total amount payable within thirty days of receipt."
)


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_path(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "scan.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


@pytest.fixture(scope="session")
def default_rule_table() -> RuleTable:
    return load_rule_table()


@pytest.fixture()
def invoice_text() -> str:
    return INVOICE_TEXT
