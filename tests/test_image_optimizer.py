"""
Tests for the upload optimizer.
"""

import asyncio
import time
from io import BytesIO

import pytest
from PIL import Image

from app.models.ocr import InputDocument
from app.utils import ImageOptimizer


def png_document(width: int, height: int, name: str = "nid.png") -> InputDocument:
    buffer = BytesIO()
    Image.new("RGBA", (width, height), (200, 10, 10, 255)).save(buffer, format="PNG")
    content = buffer.getvalue()
    return InputDocument(content=content, mimetype="image/png", originalname=name, size=len(content))


class TestImageOptimizer:

    @pytest.fixture
    def optimizer(self):
        return ImageOptimizer(max_dimension=800, jpeg_quality=75, pdf_max_size_kb=1000)

    @pytest.mark.asyncio
    async def test_large_image_is_resized_to_jpeg(self, optimizer):
        result = await optimizer.optimize_for_ocr(png_document(1600, 1200))

        assert result.is_optimized
        assert result.mimetype == "image/jpeg"
        assert result.size == len(result.content)
        assert result.originalname == "nid.png"
        with Image.open(BytesIO(result.content)) as img:
            assert img.size == (800, 600)
            assert img.format == "JPEG"

    @pytest.mark.asyncio
    async def test_small_image_is_not_enlarged(self, optimizer):
        result = await optimizer.optimize_for_ocr(png_document(300, 200))

        with Image.open(BytesIO(result.content)) as img:
            assert img.size == (300, 200)

    @pytest.mark.asyncio
    async def test_pdf_passes_through(self, optimizer, pdf_document):
        result = await optimizer.optimize_for_ocr(pdf_document)

        assert not result.is_optimized
        assert result.content == pdf_document.content
        assert result.mimetype == "application/pdf"

    @pytest.mark.asyncio
    async def test_pdf_detected_by_extension(self, optimizer):
        document = InputDocument(content=b"%PDF", mimetype="application/octet-stream", originalname="TIN.PDF", size=4)
        assert optimizer.is_pdf(document)
        result = await optimizer.optimize_for_ocr(document)
        assert result.content == b"%PDF"

    @pytest.mark.asyncio
    async def test_corrupt_image_falls_back_to_original(self, optimizer):
        document = InputDocument(content=b"not an image", mimetype="image/jpeg", originalname="x.jpg", size=12)

        result = await optimizer.optimize_for_ocr(document)

        assert not result.is_optimized
        assert result.content == b"not an image"
        assert result.mimetype == "image/jpeg"

    @pytest.mark.asyncio
    async def test_unsupported_type_is_unchanged(self, optimizer):
        document = InputDocument(content=b"GIF89a", mimetype="image/gif", originalname="x.gif", size=6)
        result = await optimizer.optimize_for_ocr(document)
        assert not result.is_optimized
        assert result.content == b"GIF89a"

    @pytest.mark.asyncio
    async def test_resize_does_not_block_event_loop(self, optimizer):
        document = png_document(4000, 3000, name="large.png")
        gaps = []
        done = asyncio.Event()

        async def ticker():
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(0.005)
                now = time.perf_counter()
                gaps.append(now - last)
                last = now

        ticking = asyncio.ensure_future(ticker())
        await asyncio.sleep(0.02)
        result = await optimizer.optimize_for_ocr(document)
        done.set()
        await ticking

        assert result.is_optimized
        assert len(gaps) > 1
        assert max(gaps) < 0.1
