"""Extraction client: one grounded generateContent call per scan."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from leadscan.core.config import Settings, get_settings
from leadscan.core.models import GeoBias, RawExtractionResult, ScanQuery
from leadscan.core.query_builder import build_generation_request
from leadscan.vendors import gemini

logger = logging.getLogger(__name__)


class ExtractionError(RuntimeError):
    """Raised when the generation engine cannot be reached or reports a failure."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


def fetch_extraction(
    query: ScanQuery,
    geo_bias: Optional[GeoBias] = None,
    settings: Optional[Settings] = None,
) -> RawExtractionResult:
    """Send the scan to the engine and return its raw text.

    There is no retry here; callers decide whether to run the scan again.
    """
    settings = settings or get_settings()
    if not settings.gemini_api_key:
        raise ExtractionError("GEMINI_API_KEY is required for extraction")

    body = build_generation_request(query, geo_bias, temperature=settings.extraction_temperature)
    logger.info(
        "Calling %s for category=%s location=%s biased=%s",
        settings.gemini_model,
        query.category,
        query.location,
        geo_bias is not None,
    )

    try:
        payload = gemini.generate_content(settings.gemini_model, body, settings.gemini_api_key)
        result = RawExtractionResult(
            text=gemini.response_text(payload),
            source_count=gemini.grounding_source_count(payload),
        )
    except (requests.RequestException, gemini.GeminiError, ValueError) as exc:
        logger.error("Extraction failure: %s", exc)
        raise ExtractionError(f"extraction engine call failed: {exc}", cause=exc) from exc
    except (TypeError, AttributeError, KeyError) as exc:
        logger.error("Unreadable engine payload: %s", exc)
        raise ExtractionError(f"extraction engine returned an unreadable payload: {exc}", cause=exc) from exc

    logger.info("Engine returned %d chars with %d grounding sources", len(result.text), result.source_count)
    return result
