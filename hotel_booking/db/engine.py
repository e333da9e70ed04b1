"""
SQLAlchemy engine singleton with production-ready connection pooling.

This module creates a single engine instance for the configured DATABASE_URL.
Server databases get a sized connection pool; SQLite (local runs) uses the
dialect's default pool since it does not accept pool sizing.
"""

from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from hotel_booking.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": 10,  # Number of connections to maintain in the pool
        "max_overflow": 20,  # Additional connections when pool is exhausted
        "pool_pre_ping": True,  # Detect stale connections before use
        "pool_recycle": 3600,
    }


engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    echo=False,
    **_engine_options(DATABASE_URL),
)


def check_engine_health(db_engine: Engine | None = None) -> bool:
    """
    Check if database engine is healthy and connections are working.

    This function is used by the /ready endpoint to verify database
    connectivity before allowing traffic to the service.

    Args:
        db_engine: Engine to probe (defaults to the module engine)

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with (db_engine or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
