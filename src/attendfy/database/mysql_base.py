from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
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


def is_duplicate_key(exc: Exception) -> bool:
    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def duplicate_key_name(exc: Exception) -> str:
    """Name of the unique key named in a duplicate-entry message ('' if unknown).

    MySQL reports e.g. ``Duplicate entry 'a@b.c' for key 'users.uq_users_email'``.
    """
    msg = str(getattr(exc, "msg", "") or exc)
    marker = "for key '"
    idx = msg.rfind(marker)
    if idx < 0:
        return ""
    return msg[idx + len(marker):].rstrip("'").split(".")[-1]


def build_where(clauses: List[str]) -> str:
    return f"WHERE {' AND '.join(clauses)}" if clauses else ""
