"""CSV export of a lead manifest."""

import csv
import io
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from leadscan.core.models import Business, ScanQuery

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Matrix ID",
    "Business Name",
    "Address",
    "Phone",
    "Email",
    "Website",
    "Leader Name",
    "Leader Role",
    "LinkedIn",
    "X (Twitter)",
    "Facebook",
    "Market Analysis",
    "Primary Channel",
]


def to_csv_row(business: Business) -> List[str]:
    return [
        business.id,
        business.name,
        business.address,
        business.phone,
        business.email,
        business.website,
        business.leader_name,
        business.leader_role,
        business.social_footprint.linkedin,
        business.social_footprint.twitter,
        business.social_footprint.facebook,
        business.description,
        business.channel,
    ]


def businesses_to_csv(businesses: Iterable[Business]) -> str:
    """Render the manifest; every field is quoted and embedded quotes are doubled."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for business in businesses:
        writer.writerow(to_csv_row(business))
    return buffer.getvalue()


def export_filename(query: Optional[ScanQuery], now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    category = re.sub(r"\s+", "_", query.category) if query else "UNSCOPED"
    return f"OM_EXTRACT_{category}_{int(now.timestamp() * 1000)}.csv"


def write_csv(path: Path, businesses: Iterable[Business]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(businesses_to_csv(businesses))
    logger.info("Exported manifest to %s", path)
    return path
