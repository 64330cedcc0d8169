from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterator

from playerclaim.core.config import read_float_env, read_int_env
from playerclaim.core.errors import ClaimFlowError, InternalError

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_CONNECT_TIMEOUT_SECONDS = 30.0
DEFAULT_SQLITE_BUSY_TIMEOUT_MS = 30_000


def _sqlite_connect_timeout_seconds() -> float:
    return read_float_env("PLAYERCLAIM_SQLITE_CONNECT_TIMEOUT_SECONDS", DEFAULT_SQLITE_CONNECT_TIMEOUT_SECONDS)


def _sqlite_busy_timeout_ms() -> int:
    return read_int_env("PLAYERCLAIM_SQLITE_BUSY_TIMEOUT_MS", DEFAULT_SQLITE_BUSY_TIMEOUT_MS)


def _configure_connection(conn: sqlite3.Connection) -> None:
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    conn.execute(f"PRAGMA busy_timeout = {_sqlite_busy_timeout_ms()};")


def get_connection(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path, timeout=_sqlite_connect_timeout_seconds())
    conn.row_factory = sqlite3.Row
    _configure_connection(conn)
    return conn


@contextmanager
def read_connection(db_path: Path) -> Iterator[sqlite3.Connection]:
    with closing(get_connection(db_path)) as conn:
        yield conn


@contextmanager
def transaction(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Run a block as one write transaction.

    BEGIN IMMEDIATE takes the write lock up front so reads made inside the
    block see the state the conditional writes will be applied to. Lifecycle
    errors raised in the block roll back and propagate unchanged; storage
    errors roll back and surface as InternalError.
    """
    conn = get_connection(db_path)
    try:
        conn.execute("BEGIN IMMEDIATE;")
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
    except ClaimFlowError:
        raise
    except sqlite3.Error as exc:
        logger.error("Transaction rolled back: %s", exc)
        raise InternalError(f"Storage failure: {exc}") from exc
    finally:
        conn.close()


@contextmanager
def connection_scope(db_path: Path, conn: sqlite3.Connection | None = None) -> Iterator[sqlite3.Connection]:
    """Use the caller's transaction when one is given, else a short-lived connection."""
    if conn is not None:
        yield conn
        return
    with closing(get_connection(db_path)) as own:
        with own:
            yield own


def initialize_schema(db_path: Path, schema_path: Path) -> None:
    with closing(get_connection(db_path)) as conn:
        conn.executescript(schema_path.read_text(encoding="utf-8"))
        conn.commit()


def default_schema_path() -> Path:
    return Path(__file__).resolve().parent / "schema.sql"
