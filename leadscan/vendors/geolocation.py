"""Best-effort position lookup used to bias map grounding."""

import logging
import math
from typing import Any, Optional

import requests

from leadscan.core.models import GeoBias

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


class GeolocationUnavailable(RuntimeError):
    """Raised when no position can be obtained (disabled, timed out, or malformed)."""


def _coordinate(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def get_current_position(
    lookup_url: str,
    timeout_ms: int = 5000,
    enabled: bool = True,
    pinned: Optional[GeoBias] = None,
) -> GeoBias:
    """Return the operator's approximate position.

    A pinned position wins over the network lookup. The lookup itself is an
    IP-based, reduced-accuracy position from an ip-api style endpoint
    (`{"status": "success", "lat": .., "lon": ..}`).
    """
    if pinned is not None:
        return pinned
    if not enabled:
        raise GeolocationUnavailable("geolocation lookup is disabled")

    try:
        response = _SESSION.get(lookup_url, timeout=timeout_ms / 1000.0)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise GeolocationUnavailable(str(exc)) from exc

    if not isinstance(payload, dict):
        raise GeolocationUnavailable("unexpected geolocation payload")
    status = payload.get("status")
    if status is not None and status != "success":
        raise GeolocationUnavailable(payload.get("message") or str(status))

    latitude = _coordinate(payload.get("lat", payload.get("latitude")))
    longitude = _coordinate(payload.get("lon", payload.get("longitude")))
    if latitude is None or longitude is None:
        raise GeolocationUnavailable("geolocation payload carried no usable coordinates")

    logger.debug("Resolved position lat=%s lng=%s", latitude, longitude)
    return GeoBias(latitude=latitude, longitude=longitude)
