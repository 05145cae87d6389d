"""
core/database.py -- Process-wide database handle.

One Database owns one SQLAlchemy Engine (and therefore one connection pool).
It is created once in the API lifespan (or by a CLI command), injected into
UserStore and CatalogueStore, and disposed on shutdown. Stores never build
their own engines.

SQLAlchemy provides a database-agnostic abstraction: swapping SQLite for
PostgreSQL is a connection string change, not a rewrite.

Usage:
    db = Database("sqlite:///libcat.db")
    users = UserStore(db)
    books = CatalogueStore(db)
    ...
    db.close()
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine

logger = logging.getLogger("libcat.database")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


class Database:
    """Engine holder with an explicit open/close lifecycle."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        is_sqlite = db_url.startswith("sqlite")
        if is_sqlite:
            # TestClient and FastAPI's thread pool touch the pool from several threads.
            connect_args["check_same_thread"] = False
        self.url = db_url
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if is_sqlite:
            event.listen(self.engine, "connect", _set_wal_mode)
        logger.info("Database engine created (%s)", self.engine.url.render_as_string(hide_password=True))

    def ping(self) -> bool:
        """Return True if a trivial query succeeds. Used by the health endpoint."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Database ping failed")
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")
