from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import (
    ConstraintViolationError,
    DuplicateValueError,
    ReferenceNotFoundError,
    StoreError,
    StoreUnavailableError,
)
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Not exported by every mysql-connector release.
ER_CHECK_CONSTRAINT_VIOLATED = getattr(errorcode, "ER_CHECK_CONSTRAINT_VIOLATED", 3819)

# unique key name -> form field
_UNIQUE_KEY_FIELDS = {
    "uq_students_codigo": "codigo",
    "uq_students_dni": "dni",
    "uq_students_email": "email",
}

_DUP_KEY_RE = re.compile(r"for key '(?:[\w]+\.)?(?P<key>[\w]+)'")
_CHECK_NAME_RE = re.compile(r"[Cc]heck constraint '(?P<name>[\w]+)'")
_NULL_COLUMN_RE = re.compile(r"Column '(?P<column>[\w]+)' cannot be null")


def translate_store_error(exc: mysql.connector.Error) -> StoreError:
    """Map a driver error onto the domain taxonomy.

    Constraint violations keep the offending field when the message names it,
    everything else is reported as the store being unavailable.
    """

    errno = getattr(exc, "errno", None)
    message = str(getattr(exc, "msg", None) or exc)

    if errno == errorcode.ER_DUP_ENTRY:
        m = _DUP_KEY_RE.search(message)
        key = m.group("key") if m else ""
        field = _UNIQUE_KEY_FIELDS.get(key)
        if field is None:
            field = next((f for f in ("codigo", "dni", "email") if f in key), None)
        return DuplicateValueError(message, field=field)

    if errno == ER_CHECK_CONSTRAINT_VIOLATED:
        m = _CHECK_NAME_RE.search(message)
        field = None
        if m:
            # chk_<table>_<column>
            field = m.group("name").split("_", 2)[-1]
        return ConstraintViolationError(message, field=field)

    if errno == errorcode.ER_BAD_NULL_ERROR:
        m = _NULL_COLUMN_RE.search(message)
        return ConstraintViolationError(message, field=m.group("column") if m else None)

    if errno in (errorcode.ER_NO_REFERENCED_ROW_2, errorcode.ER_NO_REFERENCED_ROW):
        return ReferenceNotFoundError(message, field="student_id")

    return StoreUnavailableError(message)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("cannot connect to store: %s", exc)
        raise StoreUnavailableError(str(exc)) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            _quietly(cur.close, "cursor close")
    except mysql.connector.Error as exc:
        _quietly(conn.rollback, "rollback")
        translated = translate_store_error(exc)
        logger.warning("store rejected operation: %s", exc)
        raise translated from exc
    except Exception:
        _quietly(conn.rollback, "rollback")
        raise
    finally:
        _quietly(conn.close, "close")


def _quietly(action, what: str) -> None:
    # a dropped connection fails here too; the original error is the one to report
    try:
        action()
    except mysql.connector.Error as exc:
        logger.warning("%s failed: %s", what, exc)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
