"""
Per-document-type behaviour: response schema, required fields and field
normalisation, kept in a single table keyed by OcrFileType.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from app.models.ocr import OcrFileType
from app.ocr.prompts import (
    BANK_SCHEMA,
    BO_SCHEMA,
    IMAGE_OCR_PROMPT,
    NID_SCHEMA,
    PDF_OCR_PROMPT,
    TIN_SCHEMA,
)

PDF_MIME_TYPE = "application/pdf"

_WHITESPACE = re.compile(r"\s+")


def normalize_string(value: str) -> str:
    return _WHITESPACE.sub("", value)


def parse_nid_date(value: str) -> Optional[str]:
    # dates are kept in the format printed on the card
    return value or None


@dataclass(frozen=True)
class DocumentTypePolicy:
    schema: dict
    fields: Tuple[str, ...]
    required: Tuple[str, ...]
    normalizers: Dict[str, Callable[[str], Optional[str]]] = field(default_factory=dict)


POLICIES: Dict[OcrFileType, DocumentTypePolicy] = {
    OcrFileType.NID: DocumentTypePolicy(
        schema=NID_SCHEMA,
        fields=("name", "date_of_birth", "nid_number"),
        required=("name", "date_of_birth", "nid_number"),
        normalizers={"date_of_birth": parse_nid_date, "nid_number": normalize_string},
    ),
    OcrFileType.BO: DocumentTypePolicy(
        schema=BO_SCHEMA,
        fields=("bo_id",),
        required=("bo_id",),
        normalizers={"bo_id": normalize_string},
    ),
    OcrFileType.TIN: DocumentTypePolicy(
        schema=TIN_SCHEMA,
        fields=("tin_number",),
        required=("tin_number",),
        normalizers={"tin_number": normalize_string},
    ),
    OcrFileType.BANK: DocumentTypePolicy(
        schema=BANK_SCHEMA,
        fields=("account_number", "routing_number"),
        required=("account_number",),
        normalizers={"account_number": normalize_string},
    ),
}

DEFAULT_POLICY = POLICIES[OcrFileType.NID]


def get_policy(doc_type: Union[OcrFileType, str]) -> Optional[DocumentTypePolicy]:
    """Return the policy for `doc_type`, or None for values outside OcrFileType."""
    try:
        return POLICIES[OcrFileType(doc_type)]
    except ValueError:
        return None


def select_prompt_and_schema(doc_type: Union[OcrFileType, str], mimetype: str) -> Tuple[str, dict]:
    """
    Pick the instruction text and response schema for a request.

    The schema depends only on the document type (unknown types get the NID
    schema); the prompt depends only on whether the upload is a PDF.
    """
    policy = get_policy(doc_type) or DEFAULT_POLICY
    prompt = PDF_OCR_PROMPT if mimetype == PDF_MIME_TYPE else IMAGE_OCR_PROMPT
    return prompt, policy.schema


def get_required_fields(doc_type: Union[OcrFileType, str]) -> Tuple[str, ...]:
    policy = get_policy(doc_type)
    return policy.required if policy else ()


def validate_response(parsed: Any, doc_type: Union[OcrFileType, str]) -> bool:
    """
    Check that `parsed` looks like `{"details": {...}}` and that every required
    field for the type is present and non-empty. Field formats are not checked.
    """
    if not isinstance(parsed, Mapping):
        return False
    details = parsed.get("details")
    if not isinstance(details, Mapping):
        return False
    return all(bool(details.get(name)) for name in get_required_fields(doc_type))


def normalize_details(details: Mapping[str, Any], doc_type: Union[OcrFileType, str]) -> Dict[str, Any]:
    """Apply the type's field rules to a copy of `details`. Non-string values are left alone."""
    normalized = dict(details)
    policy = get_policy(doc_type)
    if policy is None:
        return normalized
    for name, rule in policy.normalizers.items():
        value = normalized.get(name)
        if isinstance(value, str):
            result = rule(value)
            if result is not None:
                normalized[name] = result
    return normalized


def project_details(details: Mapping[str, Any], doc_type: Union[OcrFileType, str]) -> Dict[str, str]:
    """Keep only the type's schema fields with scalar values, as strings."""
    policy = get_policy(doc_type) or DEFAULT_POLICY
    return {
        name: value if isinstance(value, str) else str(value)
        for name, value in details.items()
        if name in policy.fields and isinstance(value, (str, int, float)) and not isinstance(value, bool)
    }
