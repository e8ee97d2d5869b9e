"""HTTP entrypoint that runs deep scans and serves the saved manifest."""

from __future__ import annotations

import io
import logging
import os
from typing import Any, Dict

from flask import Flask, jsonify, request, send_file

from leadscan.core import db
from leadscan.core.config import get_settings
from leadscan.core.extraction import ExtractionError
from leadscan.core.licensing import LicenseError, Tier, parse_license_key
from leadscan.core.models import ScanQuery
from leadscan.etl.export import businesses_to_csv, export_filename
from leadscan.etl.scoring import fidelity_score
from leadscan.jobs.deep_scan import execute_deep_scan

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, no engine or DB call."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "model": settings.gemini_model,
                "worker_port_config": settings.worker_port,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/scan")
def run_scan() -> Any:
    """
    Run a deep scan and return the scored manifest.
    Required JSON fields: category, location
    Optional: boolean_logic, license_key, tier
    Without a license_key only the SINGLE tier runs; PRO and ENTERPRISE answer 402.
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    required = ("category", "location")
    missing = [f for f in required if not str(payload.get(f) or "").strip()]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400

    boolean_logic = str(payload.get("boolean_logic") or "")
    query = ScanQuery(
        category=str(payload["category"]).strip(),
        location=str(payload["location"]).strip(),
        boolean_logic=boolean_logic if boolean_logic.strip() else None,
    )

    try:
        tier = Tier(str(payload.get("tier") or Tier.SINGLE.value).upper())
    except ValueError:
        return jsonify({"error": "tier must be one of SINGLE, PRO, ENTERPRISE"}), 400

    try:
        license_key = payload.get("license_key")
        authorization = parse_license_key(str(license_key)) if license_key else None
        businesses = execute_deep_scan(query, authorization, tier=tier)
    except LicenseError as exc:
        return jsonify({"error": str(exc)}), 402
    except ExtractionError as exc:
        logger.error("Scan failed for %s: %s", query, exc)
        return jsonify({"error": "node synchronization lost"}), 502

    if not businesses:
        return jsonify({"data": {"status": "empty", "message": "manifest empty", "leads": []}}), 200

    leads = [{**business.to_dict(), "fidelity": fidelity_score(business)} for business in businesses]
    return jsonify({"data": {"status": "ok", "query": query.to_dict(), "leads": leads}}), 200


@app.get("/session")
def get_session() -> Any:
    saved = db.load_session()
    if saved is None:
        return jsonify({"data": None}), 200
    query, businesses = saved
    leads = [{**business.to_dict(), "fidelity": fidelity_score(business)} for business in businesses]
    return jsonify({"data": {"query": query.to_dict(), "leads": leads}}), 200


@app.delete("/session")
def purge_session() -> Any:
    db.clear_session()
    return jsonify({"data": {"status": "purged"}}), 200


@app.get("/session/export.csv")
def export_session() -> Any:
    saved = db.load_session()
    if saved is None or not saved[1]:
        return jsonify({"error": "manifest empty"}), 404
    query, businesses = saved
    return send_file(
        io.BytesIO(businesses_to_csv(businesses).encode("utf-8")),
        mimetype="text/csv",
        as_attachment=True,
        download_name=export_filename(query),
    )


def main() -> None:
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    settings = get_settings()
    if settings.database_url:
        db.ensure_schema()

    port = int(env_port or settings.worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
