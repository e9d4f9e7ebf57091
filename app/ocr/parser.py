"""
Pull the JSON answer out of a Gemini response.

The answer can sit in a few places depending on how the response was
produced: the first candidate's first part as text, the same part as inline
(base64) data, or the response-level `text`. Each shape has one extractor;
they are tried in order and the first one whose shape matches decides the
outcome. Works on SDK response objects and on plain dicts.
"""

import base64
import binascii
import json
import logging
from typing import Any, Callable, List, Mapping, Optional

logger = logging.getLogger(__name__)

_MISSING = object()
# returned by an extractor whose shape is not present in the response
_NO_MATCH = object()


def _get(obj: Any, *names: str) -> Any:
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        else:
            value = getattr(obj, name, _MISSING)
            if value is not _MISSING:
                return value
    return None


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        logger.debug("Provider returned malformed JSON")
        return None


def _first_part(response: Any) -> Any:
    candidates = _get(response, "candidates")
    if not isinstance(candidates, (list, tuple)) or not candidates:
        return None
    content = _get(candidates[0], "content")
    parts = _get(content, "parts") if content is not None else None
    if not isinstance(parts, (list, tuple)) or not parts:
        return None
    return parts[0]


def _from_part_text(response: Any) -> Any:
    part = _first_part(response)
    text = _get(part, "text") if part is not None else None
    if not isinstance(text, str):
        return _NO_MATCH
    return _loads(text)


def _from_part_inline_data(response: Any) -> Any:
    part = _first_part(response)
    inline = _get(part, "inline_data", "inlineData") if part is not None else None
    data = _get(inline, "data") if inline is not None else None
    if isinstance(data, str):
        try:
            data = base64.b64decode(data)
        except (binascii.Error, ValueError):
            return None
    elif not isinstance(data, (bytes, bytearray)):
        return _NO_MATCH
    try:
        return _loads(bytes(data).decode("utf-8"))
    except UnicodeDecodeError:
        return None


def _from_response_text(response: Any) -> Any:
    try:
        text = _get(response, "text")
    except ValueError:
        # the SDK's `text` accessor refuses some candidate layouts
        return _NO_MATCH
    if not isinstance(text, str):
        return _NO_MATCH
    return _loads(text)


EXTRACTORS: List[Callable[[Any], Any]] = [
    _from_part_text,
    _from_part_inline_data,
    _from_response_text,
]


def parse_gemini_response(response: Any) -> Optional[Any]:
    """Return the decoded JSON answer, or None if there is none or it is malformed."""
    if response is None:
        return None
    for extract in EXTRACTORS:
        result = extract(response)
        if result is not _NO_MATCH:
            return result
    return None
