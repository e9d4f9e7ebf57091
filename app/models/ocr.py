# app/models/ocr.py
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class OcrFileType(str, Enum):
    NID = "NID"
    BO = "BO"
    TIN = "TIN"
    BANK = "BANK"


class FailureReason(str, Enum):
    """Why a result came back with empty details. Internal only, never serialised."""

    NO_FILE = "no_file"
    PROVIDER_ERROR = "provider_error"
    UNPARSEABLE_RESPONSE = "unparseable_response"
    VALIDATION_FAILED = "validation_failed"


class InputDocument(BaseModel):
    content: bytes
    mimetype: str
    originalname: str
    size: int  # in bytes


class OptimizedDocument(InputDocument):
    is_optimized: bool = False


class OcrResult(BaseModel):
    type: OcrFileType
    details: Dict[str, str] = Field(default_factory=dict)
    failure_reason: Optional[FailureReason] = Field(default=None, exclude=True)

    @classmethod
    def empty(cls, type: OcrFileType, reason: Optional[FailureReason] = None) -> "OcrResult":
        return cls(type=type, details={}, failure_reason=reason)
