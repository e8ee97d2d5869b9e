"""Client utilities for the Gemini generateContent REST API."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiError(RuntimeError):
    """Raised when the Gemini API returns an error payload."""


def generate_content(model: str, body: Dict[str, Any], api_key: str) -> Dict[str, Any]:
    # No client-side deadline: the call is bounded by the transport only.
    response = _SESSION.post(
        f"{_BASE_URL}/models/{model}:generateContent",
        params={"key": api_key},
        json=body,
    )
    try:
        payload = response.json()
    except ValueError:
        response.raise_for_status()
        raise GeminiError(f"non-JSON response from Gemini (status {response.status_code})")

    error = payload.get("error") if isinstance(payload, dict) else None
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        status = error.get("status") if isinstance(error, dict) else None
        logger.error("generateContent failed: status=%s, message=%s", status, message)
        raise GeminiError(message or status or "unknown Gemini error")
    response.raise_for_status()
    return payload


def response_text(payload: Dict[str, Any]) -> str:
    """Join the text parts of the first candidate, like the SDK's `response.text`."""
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def grounding_source_count(payload: Dict[str, Any]) -> int:
    candidates = payload.get("candidates") or []
    if not candidates:
        return 0
    metadata = candidates[0].get("groundingMetadata") or {}
    return len(metadata.get("groundingChunks") or [])
