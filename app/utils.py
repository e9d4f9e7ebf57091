import logging
from io import BytesIO

from fastapi.concurrency import run_in_threadpool
from PIL import Image

from app.config import OCR_JPEG_QUALITY, OCR_MAX_IMAGE_DIMENSION, OCR_PDF_MAX_SIZE_KB
from app.models.ocr import InputDocument, OptimizedDocument

logger = logging.getLogger(__name__)

IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/bmp",
    "image/tiff",
}


# ============== upload optimizer ===============
class ImageOptimizer:
    """Shrink uploads before they are sent to the provider. Never raises."""

    def __init__(
        self,
        max_dimension: int = OCR_MAX_IMAGE_DIMENSION,
        jpeg_quality: int = OCR_JPEG_QUALITY,
        pdf_max_size_kb: int = OCR_PDF_MAX_SIZE_KB,
    ):
        self.max_dimension = max_dimension
        self.jpeg_quality = jpeg_quality
        self.pdf_max_size_kb = pdf_max_size_kb

    async def optimize_for_ocr(self, document: InputDocument) -> OptimizedDocument:
        try:
            if self.is_pdf(document):
                return self.optimize_pdf(document)
            if self.should_optimize_image(document):
                # Pillow work is CPU bound; keep it off the event loop
                return await run_in_threadpool(self.optimize_image, document)
        except Exception as e:
            logger.warning(f"Could not optimize {document.originalname!r}, sending original: {e}")
        return self.unchanged(document)

    @staticmethod
    def unchanged(document: InputDocument) -> OptimizedDocument:
        return OptimizedDocument(**document.model_dump(exclude={"is_optimized"}), is_optimized=False)

    @staticmethod
    def is_pdf(document: InputDocument) -> bool:
        return document.mimetype == "application/pdf" or (document.originalname or "").lower().endswith(".pdf")

    def should_optimize_image(self, document: InputDocument) -> bool:
        return not self.is_pdf(document) and document.mimetype in IMAGE_TYPES

    def optimize_pdf(self, document: InputDocument) -> OptimizedDocument:
        # TODO: rasterise oversized PDFs instead of forwarding them as-is
        if document.size / 1024 > self.pdf_max_size_kb:
            logger.debug(f"PDF {document.originalname!r} is {document.size} bytes, forwarding unchanged")
        return self.unchanged(document)

    def optimize_image(self, document: InputDocument) -> OptimizedDocument:
        with Image.open(BytesIO(document.content)) as img:
            img.thumbnail((self.max_dimension, self.max_dimension))
            if img.mode != "RGB":
                img = img.convert("RGB")
            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=self.jpeg_quality, optimize=True)

        data = buffer.getvalue()
        logger.debug(f"Optimized {document.originalname!r}: {document.size} -> {len(data)} bytes")
        return OptimizedDocument(
            content=data,
            mimetype="image/jpeg",
            originalname=document.originalname,
            size=len(data),
            is_optimized=True,
        )
