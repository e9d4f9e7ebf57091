import json
from types import SimpleNamespace
from unittest.mock import AsyncMock


def gemini_text_response(payload) -> dict:
    """A response envelope carrying `payload` as JSON text in the first candidate part."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def fake_genai_client(**kwargs) -> SimpleNamespace:
    """Stand-in for genai.Client exposing only `aio.models.generate_content`."""
    generate_content = AsyncMock(**kwargs)
    return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))
