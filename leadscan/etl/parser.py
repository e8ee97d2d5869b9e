"""Turn the engine's delimited free text into Business records."""

from __future__ import annotations

import logging
import math
import random
import re
import string
import time
from typing import Dict, List, Optional, Set

from leadscan.core.models import NOT_AVAILABLE, Business, SocialFootprint

logger = logging.getLogger(__name__)

_LEAD_START_RE = re.compile(r"\[\[LEAD_START\]\]", re.IGNORECASE)
_LEAD_END_RE = re.compile(r"\[\[LEAD_END\]\]", re.IGNORECASE)
_LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

FIELD_KEYS = ("NAME", "ADDR", "PHONE", "EMAIL", "WEB", "LEADER", "ROLE", "LI", "TW", "FB", "DESC", "LAT", "LNG", "CHAN")
_ID_ALPHABET = string.ascii_uppercase + string.digits
MIN_NAME_LENGTH = 2


def parse_extraction_response(text: str, source_count: int = 0) -> List[Business]:
    """Parse every complete lead block in `text`, in order.

    `source_count` is carried for future confidence weighting and does not
    influence the output today.
    """
    businesses: List[Business] = []
    issued_ids: Set[str] = set()
    dropped = 0

    for block in _LEAD_START_RE.split(text or ""):
        fields = _read_block(block)
        if fields is None:
            continue

        name = _field(fields, "NAME")
        if name == NOT_AVAILABLE or len(name) < MIN_NAME_LENGTH:
            dropped += 1
            continue

        businesses.append(
            Business(
                id=new_lead_id(issued_ids),
                name=name,
                address=_field(fields, "ADDR"),
                phone=_field(fields, "PHONE"),
                email=_field(fields, "EMAIL"),
                website=_field(fields, "WEB"),
                leader_name=_field(fields, "LEADER"),
                leader_role=_field(fields, "ROLE"),
                description=_field(fields, "DESC"),
                channel=_field(fields, "CHAN"),
                social_footprint=SocialFootprint(
                    linkedin=_field(fields, "LI"),
                    twitter=_field(fields, "TW"),
                    facebook=_field(fields, "FB"),
                ),
                latitude=_safe_coordinate(_field(fields, "LAT")),
                longitude=_safe_coordinate(_field(fields, "LNG")),
            )
        )

    logger.info(
        "Parsed %d leads (%d nameless blocks dropped, %d grounding sources)",
        len(businesses),
        dropped,
        source_count,
    )
    return businesses


def _read_block(block: str) -> Optional[Dict[str, str]]:
    """Return the first value seen for each key, or None for an unterminated block."""
    parts = _LEAD_END_RE.split(block, maxsplit=1)
    if len(parts) < 2:
        return None

    fields: Dict[str, str] = {}
    for line in parts[0].strip().split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        fields.setdefault(key.upper(), value.strip())
    return fields


def _field(fields: Dict[str, str], key: str) -> str:
    return fields.get(key) or NOT_AVAILABLE


def _safe_coordinate(value: str) -> float:
    """Read a leading decimal number (e.g. `40.71 N`), falling back to 0.0."""
    match = _LEADING_FLOAT_RE.match(value.strip())
    if not match:
        return 0.0
    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def new_lead_id(issued: Optional[Set[str]] = None) -> str:
    """Generate ids like `NODE-K3ZQ-4821`, unique against `issued`."""
    while True:
        token = "".join(random.choices(_ID_ALPHABET, k=4))
        suffix = str(int(time.time() * 1000))[-4:]
        lead_id = f"NODE-{token}-{suffix}"
        if issued is None:
            return lead_id
        if lead_id not in issued:
            issued.add(lead_id)
            return lead_id
