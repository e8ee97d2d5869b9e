"""Licence tiers and the gate that sits in front of a deep scan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class LicenseError(RuntimeError):
    """Raised when the caller's authorization does not cover the requested tier."""


class Tier(str, Enum):
    SINGLE = "SINGLE"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


PRICING: Dict[Tier, Dict[str, object]] = {
    Tier.SINGLE: {"usd": 4.89, "ngn": 4899, "label": "Single Burst", "limit": "15 Leads / Burst"},
    Tier.PRO: {"usd": 37, "ngn": 37000, "label": "Pro Node", "limit": "15 Sessions / Mo"},
    Tier.ENTERPRISE: {"usd": 169, "ngn": 169000, "label": "Enterprise Matrix", "limit": "5,000 Nodes / Mo (Capped)"},
}


@dataclass(frozen=True)
class Authorization:
    tier: Tier
    license_key: Optional[str] = None


def parse_license_key(license_key: str) -> Authorization:
    """Read the tier marker out of keys like `OM-REF-PRO-abc123`.

    Only recurring tiers are licensable; a single burst is paid per scan.
    """
    parts = [part.strip().upper() for part in (license_key or "").split("-")]
    if Tier.PRO.value in parts:
        tier = Tier.PRO
    elif Tier.ENTERPRISE.value in parts:
        tier = Tier.ENTERPRISE
    else:
        raise LicenseError("LICENSE MISMATCH: Tier signature missing.")
    logger.info("External license synchronized: %s node active", tier.value)
    return Authorization(tier=tier, license_key=license_key.strip())


def covers(authorization: Authorization, requested: Tier) -> bool:
    if authorization.tier is Tier.ENTERPRISE:
        return True
    if authorization.tier is Tier.PRO:
        return requested is not Tier.ENTERPRISE
    return requested is Tier.SINGLE


def ensure_authorized(authorization: Optional[Authorization], requested: Tier) -> None:
    if authorization is None or not covers(authorization, requested):
        held = authorization.tier.value if authorization else "none"
        raise LicenseError(f"authorization {held} does not cover tier {requested.value}")
