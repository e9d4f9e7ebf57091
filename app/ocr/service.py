import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from app.config import GEMINI_API_KEY, GEMINI_MODEL_NAME
from app.models.ocr import FailureReason, InputDocument, OcrFileType, OcrResult
from app.ocr.dedup import InFlightDeduplicator
from app.ocr.parser import parse_gemini_response
from app.ocr.policy import (
    normalize_details,
    project_details,
    select_prompt_and_schema,
    validate_response,
)
from app.utils import ImageOptimizer

logger = logging.getLogger(__name__)


def request_fingerprint(document: InputDocument, doc_type: OcrFileType) -> str:
    # size/type/name, not a content hash: see DESIGN.md
    return f"{document.size}-{doc_type.value}-{document.originalname}"


class OcrService:
    """
    Best-effort extraction of identity/financial fields from an uploaded document.

    `extract_ocr_info` never raises: every failure comes back as an empty
    `details` mapping, tagged internally with a FailureReason for the logs.
    Identical concurrent requests share one provider call.
    """

    generation_config = dict(
        temperature=0,
        max_output_tokens=256,
        thinking_config=types.ThinkingConfig(thinking_budget=0),
        response_mime_type="application/json",
    )

    def __init__(
        self,
        client: Optional[Any] = None,
        image_optimizer: Optional[ImageOptimizer] = None,
        deduplicator: Optional[InFlightDeduplicator[OcrResult]] = None,
        model_name: str = GEMINI_MODEL_NAME,
    ):
        self._client = client
        self.image_optimizer = image_optimizer if image_optimizer is not None else ImageOptimizer()
        self.deduplicator = deduplicator if deduplicator is not None else InFlightDeduplicator()
        self.model_name = model_name

    @property
    def client(self):
        # created on first use so a missing key degrades a request, not startup
        if self._client is None:
            self._client = genai.Client(api_key=GEMINI_API_KEY)
        return self._client

    async def extract_ocr_info(self, document: Optional[InputDocument], doc_type: OcrFileType) -> OcrResult:
        if document is None:
            logger.info(f"No file uploaded for {doc_type.value}, returning empty details")
            return OcrResult.empty(doc_type, FailureReason.NO_FILE)

        fingerprint = request_fingerprint(document, doc_type)
        try:
            result = await self.deduplicator.submit(
                fingerprint, lambda: self.process_ocr_request(document, doc_type)
            )
        except Exception:
            logger.exception(f"OCR request {fingerprint} failed")
            return OcrResult.empty(doc_type, FailureReason.PROVIDER_ERROR)

        if result.failure_reason is not None:
            logger.warning(f"OCR request {fingerprint} degraded to empty details: {result.failure_reason.value}")
        return result

    async def process_ocr_request(self, document: InputDocument, doc_type: OcrFileType) -> OcrResult:
        try:
            response = await self.extract_with_genai(document, doc_type)
        except Exception as e:
            logger.error(f"Gemini call failed for {document.originalname!r}: {e}")
            return OcrResult.empty(doc_type, FailureReason.PROVIDER_ERROR)

        parsed = parse_gemini_response(response)
        if parsed is None:
            return OcrResult.empty(doc_type, FailureReason.UNPARSEABLE_RESPONSE)
        if not validate_response(parsed, doc_type):
            return OcrResult.empty(doc_type, FailureReason.VALIDATION_FAILED)

        details = normalize_details(parsed["details"], doc_type)
        return OcrResult(type=doc_type, details=project_details(details, doc_type))

    async def extract_with_genai(self, document: InputDocument, doc_type: OcrFileType) -> Any:
        optimized = await self.image_optimizer.optimize_for_ocr(document)
        prompt, schema = select_prompt_and_schema(doc_type, optimized.mimetype)

        return await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=[
                types.Content(
                    role="user",
                    parts=[
                        types.Part.from_text(text=prompt),
                        types.Part.from_bytes(data=optimized.content, mime_type=optimized.mimetype),
                    ],
                )
            ],
            config=types.GenerateContentConfig(**self.generation_config, response_schema=schema),
        )
