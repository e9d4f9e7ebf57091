import pytest

from app.models.ocr import InputDocument


@pytest.fixture
def pdf_document():
    content = b"%PDF-1.4 fake statement"
    return InputDocument(
        content=content,
        mimetype="application/pdf",
        originalname="statement.pdf",
        size=len(content),
    )
