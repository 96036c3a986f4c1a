from __future__ import annotations

import json
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import PersistenceError
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
    except mysql.connector.Error as exc:
        conn.rollback()
        raise PersistenceError(str(exc)) from exc
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


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def dump_body(data: Dict[str, Any]) -> str:
    return json.dumps(data, default=_json_default, ensure_ascii=False, sort_keys=True)


def load_body(value: Any) -> Dict[str, Any]:
    """Normalize a JSON column across connector implementations.

    mysql-connector can return JSON as str, bytes/bytearray, or an already
    decoded dict.
    """

    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value.strip() else {}
    raise TypeError(f"Unsupported MySQL JSON value type: {type(value)!r}")


def dump_value(value: Any) -> str:
    return json.dumps(value, default=_json_default, ensure_ascii=False)


def json_path(field: str) -> str:
    """JSON path of a top-level document field (``$."studentId"``)."""
    return '$."' + field.replace("\\", "\\\\").replace('"', '\\"') + '"'
