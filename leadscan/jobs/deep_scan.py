"""CLI job that runs one grounded deep scan and saves the manifest."""

import argparse
import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import List, Optional

from leadscan.core import db
from leadscan.core.config import Settings, get_settings
from leadscan.core.extraction import ExtractionError, fetch_extraction
from leadscan.core.licensing import Authorization, LicenseError, Tier, ensure_authorized, parse_license_key
from leadscan.core.models import Business, ScanQuery
from leadscan.core.query_builder import acquire_geo_bias
from leadscan.etl.export import write_csv
from leadscan.etl.parser import parse_extraction_response
from leadscan.etl.scoring import fidelity_score

logger = logging.getLogger(__name__)


def execute_deep_scan(
    query: ScanQuery,
    authorization: Optional[Authorization] = None,
    *,
    tier: Tier = Tier.SINGLE,
    settings: Optional[Settings] = None,
    persist: bool = True,
) -> List[Business]:
    """Geolocate, extract, parse and (optionally) save one scan.

    Returns an empty list when the engine produced no usable leads. Engine
    failures surface as ExtractionError; nothing is retried here. Without an
    authorization only a SINGLE scan may run; PRO and ENTERPRISE need a licence.
    """
    if authorization is not None or tier is not Tier.SINGLE:
        ensure_authorized(authorization, tier)

    settings = settings or get_settings()
    logger.info("Starting deep scan for category=%s location=%s", query.category, query.location)

    geo_bias = acquire_geo_bias(settings)
    raw = fetch_extraction(query, geo_bias, settings)
    businesses = parse_extraction_response(raw.text, raw.source_count)

    if not businesses:
        logger.warning("Manifest empty for category=%s location=%s", query.category, query.location)
        return businesses

    logger.info("Deep scan produced %d leads", len(businesses))
    if persist:
        try:
            db.save_session(query, businesses)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to save session: %s", exc)
    return businesses


def submit_deep_scan(
    query: ScanQuery,
    authorization: Optional[Authorization] = None,
    **kwargs,
) -> "Future[List[Business]]":
    """Start the scan on its own thread; the future resolves exactly once.

    Overlapping calls are not queued or merged: each one runs immediately.
    """
    future: "Future[List[Business]]" = Future()

    def _run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(execute_deep_scan(query, authorization, **kwargs))
        except Exception as exc:  # noqa: BLE001 - delivered through the future
            future.set_exception(exc)

    threading.Thread(target=_run, name="deep-scan", daemon=True).start()
    return future


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a grounded lead extraction scan")
    parser.add_argument("--category", required=True, help="Business category, e.g. 'dental clinics'")
    parser.add_argument("--location", required=True, help="Geographic zone, e.g. 'Lagos, Nigeria'")
    parser.add_argument("--boolean", dest="boolean_logic", help="Boolean refinement passed to the engine")
    parser.add_argument("--license-key", dest="license_key", help="Licence key for PRO/ENTERPRISE scans")
    parser.add_argument(
        "--tier",
        choices=[tier.value for tier in Tier],
        default=Tier.SINGLE.value,
        help="Tier requested for this scan",
    )
    parser.add_argument("--export", dest="export_path", type=Path, help="Write the manifest as CSV to this path")
    parser.add_argument("--no-save", dest="persist", action="store_false", help="Do not overwrite the saved session")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    category = args.category.strip()
    location = args.location.strip()
    if not category or not location:
        logger.error("Category and location must not be blank")
        return 2

    query = ScanQuery(category=category, location=location, boolean_logic=args.boolean_logic)
    try:
        authorization = parse_license_key(args.license_key) if args.license_key else None
        businesses = execute_deep_scan(
            query,
            authorization,
            tier=Tier(args.tier),
            persist=args.persist,
        )
    except LicenseError as exc:
        logger.error("Licence error: %s", exc)
        return 2
    except ExtractionError as exc:
        logger.error("Node synchronization lost: %s", exc)
        return 1

    for business in businesses:
        logger.info("%s %s [%d] %s", business.id, business.name, fidelity_score(business), business.email)
    if args.export_path and businesses:
        try:
            write_csv(args.export_path, businesses)
        except OSError as exc:
            logger.error("Failed to write export to %s: %s", args.export_path, exc)
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
