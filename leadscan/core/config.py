"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_GEO_LOOKUP_URL = "http://ip-api.com/json/"


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str
    database_url: str
    gemini_model: str = "gemini-3-flash-preview"
    extraction_temperature: float = 0.1
    worker_port: int = 9000
    geo_lookup_enabled: bool = True
    geo_lookup_url: str = DEFAULT_GEO_LOOKUP_URL
    geo_timeout_ms: int = 5000
    geo_latitude: Optional[float] = None
    geo_longitude: Optional[float] = None
    session_slot: str = "last_session"


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number; ignoring it.", name, raw)
        return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    gemini_api_key = os.getenv("GEMINI_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    gemini_model = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
    extraction_temperature = float(os.getenv("EXTRACTION_TEMPERATURE", "0.1"))
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    geo_lookup_enabled = os.getenv("GEO_LOOKUP_ENABLED", "true").lower() in {"1", "true", "yes"}
    geo_lookup_url = os.getenv("GEO_LOOKUP_URL") or DEFAULT_GEO_LOOKUP_URL
    geo_timeout_ms = int(os.getenv("GEO_TIMEOUT_MS", "5000"))
    geo_latitude = _optional_float("GEO_LATITUDE")
    geo_longitude = _optional_float("GEO_LONGITUDE")
    session_slot = os.getenv("SESSION_SLOT", "").strip() or "last_session"

    if not gemini_api_key:
        logger.warning("GEMINI_API_KEY is not configured; extraction requests will fail.")
    if not database_url:
        logger.warning("DATABASE_URL is not set; session persistence will fail.")
    if (geo_latitude is None) != (geo_longitude is None):
        logger.warning("GEO_LATITUDE and GEO_LONGITUDE must be set together; ignoring the pinned position.")
        geo_latitude = geo_longitude = None

    return Settings(
        gemini_api_key=gemini_api_key,
        database_url=database_url,
        gemini_model=gemini_model,
        extraction_temperature=extraction_temperature,
        worker_port=worker_port,
        geo_lookup_enabled=geo_lookup_enabled,
        geo_lookup_url=geo_lookup_url,
        geo_timeout_ms=geo_timeout_ms,
        geo_latitude=geo_latitude,
        geo_longitude=geo_longitude,
        session_slot=session_slot,
    )
