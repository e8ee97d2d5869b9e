"""Database helpers for the saved scan session."""

import logging
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple

import psycopg2
from psycopg2 import extras, pool

from leadscan.core.config import get_settings
from leadscan.core.models import Business, ScanQuery

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS scan_sessions (
    slot TEXT PRIMARY KEY,
    query JSONB NOT NULL,
    results JSONB NOT NULL,
    saved_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

_UPSERT_SESSION = """
INSERT INTO scan_sessions (
    slot,
    query,
    results,
    saved_at
) VALUES (
    %(slot)s,
    %(query)s,
    %(results)s,
    NOW()
)
ON CONFLICT (slot) DO UPDATE SET
    query = EXCLUDED.query,
    results = EXCLUDED.results,
    saved_at = NOW();
"""

_SELECT_SESSION = "SELECT query, results FROM scan_sessions WHERE slot = %(slot)s;"

_DELETE_SESSION = "DELETE FROM scan_sessions WHERE slot = %(slot)s;"


def ensure_schema() -> None:
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_CREATE_TABLE)
        conn.commit()


def _slot(slot: Optional[str]) -> str:
    return slot or get_settings().session_slot


def save_session(query: ScanQuery, businesses: Sequence[Business], slot: Optional[str] = None) -> None:
    """Overwrite the saved session with the latest successful scan."""
    params = {
        "slot": _slot(slot),
        "query": extras.Json(query.to_dict()),
        "results": extras.Json([business.to_dict() for business in businesses]),
    }
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_UPSERT_SESSION, params)
        conn.commit()
        logger.debug("Saved %d leads to session slot %s", len(businesses), params["slot"])


def load_session(slot: Optional[str] = None) -> Optional[Tuple[ScanQuery, List[Business]]]:
    """Return the saved query and leads, purging the slot if it cannot be decoded."""
    slot = _slot(slot)
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_SELECT_SESSION, {"slot": slot})
            row = cur.fetchone()

    if row is None:
        return None

    raw_query, raw_results = row
    try:
        query = ScanQuery.from_dict(raw_query)
        businesses = [Business.from_dict(item) for item in raw_results]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Integrity check failed for session %s (%s). Cache purged.", slot, exc)
        clear_session(slot)
        return None
    return query, businesses


def clear_session(slot: Optional[str] = None) -> None:
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_DELETE_SESSION, {"slot": _slot(slot)})
        conn.commit()
    logger.info("Session slot cleared")
