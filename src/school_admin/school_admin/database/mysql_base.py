from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection, one cursor, one transaction.

    Commits when the block exits normally and rolls back when it raises.
    Cursor and connection are closed on both paths.
    """
    conn = conn_factory.connect()
    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        conn.commit()
    except Exception:
        logger.debug("Rolling back transaction on %s", conn_factory.database)
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def execute_rowcount(conn_factory: DatabaseConnection, sql: str, params: Sequence[Any] = ()) -> int:
    """Run one write statement in its own transaction; returns the affected row count.

    Conditional updates (`... WHERE status=%s`) rely on this count to tell
    whether they won.
    """
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute(sql, tuple(params))
        return int(cur.rowcount or 0)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
