from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.models.ocr import InputDocument, OcrFileType, OcrResult
from app.ocr.service import OcrService

router = APIRouter()

_ocr_service: Optional[OcrService] = None


def get_ocr_service() -> OcrService:
    # one service per process so concurrent uploads share the in-flight table
    global _ocr_service
    if _ocr_service is None:
        _ocr_service = OcrService()
    return _ocr_service


async def read_upload(file: Optional[UploadFile]) -> Optional[InputDocument]:
    if file is None:
        return None
    content = await file.read()
    return InputDocument(
        content=content,
        mimetype=file.content_type or "application/octet-stream",
        originalname=file.filename or "",
        size=file.size if file.size is not None else len(content),
    )


@router.post(
    "",
    response_model=OcrResult,
    summary="Extract NID/BO/TIN/BANK info from image/pdf",
)
async def extract_ocr_info(
    type: OcrFileType = Form(..., description="Document type"),
    file: Optional[UploadFile] = File(None, description="Image or PDF file"),
    ocr_service: OcrService = Depends(get_ocr_service),
):
    document = await read_upload(file)
    return await ocr_service.extract_ocr_info(document, type)
