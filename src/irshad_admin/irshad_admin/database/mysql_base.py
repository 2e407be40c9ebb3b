from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, DomainError, ErrorCode
from .connection import DatabaseConnection

FOREIGN_KEY_ERRNOS = (errorcode.ER_ROW_IS_REFERENCED_2, errorcode.ER_NO_REFERENCED_ROW_2)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on exit, rollback on any error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def new_id() -> str:
    return str(uuid.uuid4())


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must pass a non-empty sequence."""
    return ",".join(["%s"] * len(values))


def map_db_error(exc: Exception) -> Optional[DomainError]:
    """Translate known constraint violations into coded domain errors.

    Returns None for errors that have no domain meaning (connection loss, syntax, ...).
    """
    if not isinstance(exc, mysql.connector.errors.IntegrityError):
        return None
    if exc.errno == errorcode.ER_DUP_ENTRY:
        return ConflictError("A record with the same unique value already exists", ErrorCode.UNIQUE_CONSTRAINT)
    if exc.errno in FOREIGN_KEY_ERRNOS:
        return ConflictError("The record is referenced by, or references, missing data", ErrorCode.FOREIGN_KEY_CONSTRAINT)
    return None


def is_unique_violation(exc: Exception) -> bool:
    return isinstance(exc, mysql.connector.errors.IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY


def to_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """DATETIME columns hold naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
