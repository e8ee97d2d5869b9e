"""Assemble the grounded generateContent request for a scan."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from leadscan.core.config import Settings
from leadscan.core.models import GeoBias, ScanQuery
from leadscan.vendors.geolocation import GeolocationUnavailable, get_current_position

logger = logging.getLogger(__name__)

STANDARD_EXTRACTION = "Standard Extraction"
LEAD_START = "[[LEAD_START]]"
LEAD_END = "[[LEAD_END]]"

SYSTEM_INSTRUCTION = """You are the Occam Matrix Intelligence Engine.
Extract high-fidelity business data and identify Market Leaders (Founders, CEOs, Directors) using Google Maps and web grounding.

CRITICAL RULES:
- BOOLEAN RESOLUTION: Apply the Boolean script precisely (e.g., "{boolean_logic}").
- SOCIAL MINING: Find specific profiles on LinkedIn, Twitter, and Facebook.
- CONTACT FIDELITY: Prioritize corporate emails.

OUTPUT:
Generate 10-15 leads. Wrap each lead in [[LEAD_START]] and [[LEAD_END]].
FIELDS:
NAME, ADDR, PHONE, EMAIL, WEB, LEADER (Name), ROLE (Title), LI (LinkedIn), TW (Twitter), FB (Facebook), DESC (Analysis), LAT, LNG, CHAN (Marketing Channel)."""


def boolean_script(query: ScanQuery) -> str:
    logic = query.boolean_logic or ""
    return logic if logic.strip() else STANDARD_EXTRACTION


def build_system_instruction(query: ScanQuery) -> str:
    return SYSTEM_INSTRUCTION.format(boolean_logic=boolean_script(query))


def build_prompt(query: ScanQuery) -> str:
    return (
        f"CATEGORY: {query.category}\n"
        f"LOCATION: {query.location}\n"
        f"BOOLEAN SCRIPT: {boolean_script(query)}"
    )


def build_generation_request(
    query: ScanQuery,
    geo_bias: Optional[GeoBias] = None,
    temperature: float = 0.1,
) -> Dict[str, Any]:
    """Build the JSON body for a grounded generateContent call.

    The retrieval hint is attached only when a position is known; there is no
    fallback coordinate.
    """
    body: Dict[str, Any] = {
        "systemInstruction": {"parts": [{"text": build_system_instruction(query)}]},
        "contents": [{"role": "user", "parts": [{"text": build_prompt(query)}]}],
        "tools": [{"googleMaps": {}}, {"googleSearch": {}}],
        "generationConfig": {"temperature": temperature},
    }
    if geo_bias is not None:
        body["toolConfig"] = {
            "retrievalConfig": {
                "latLng": {"latitude": geo_bias.latitude, "longitude": geo_bias.longitude}
            }
        }
    return body


def acquire_geo_bias(settings: Settings) -> Optional[GeoBias]:
    """Try once to locate the operator; any failure means no bias."""
    pinned = None
    if settings.geo_latitude is not None and settings.geo_longitude is not None:
        pinned = GeoBias(latitude=settings.geo_latitude, longitude=settings.geo_longitude)

    try:
        return get_current_position(
            settings.geo_lookup_url,
            timeout_ms=settings.geo_timeout_ms,
            enabled=settings.geo_lookup_enabled,
            pinned=pinned,
        )
    except GeolocationUnavailable as exc:
        logger.warning("Geolocation context bypassed: %s", exc)
        return None
