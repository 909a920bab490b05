"""PostgreSQL-specific helpers: error mapping, value decoding and result shaping."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import GlanceConnectionError
from .schema import ForeignKey, Index
from .types import ColumnInfo, QueryResult, Row, Value

logger = logging.getLogger(__name__)

QUERY_TIMEOUT_SECS = 30
"""Seconds a query may run before it is abandoned."""

MAX_ROWS = 1000
"""Most rows kept from a single query result."""

MAX_RETRY_ATTEMPTS = 3
"""Connection attempts made before giving up."""

RETRY_BASE_DELAY_MS = 500
"""Delay before the first retry; it doubles after each attempt."""

_TRANSIENT_MARKERS = (
    "connection refused",
    "timed out",
    "timeout",
    "temporarily unavailable",
    "connection reset",
    "broken pipe",
)

_INT_RANGES = {
    "INT2": 16,
    "SMALLINT": 16,
    "INT4": 32,
    "INT": 32,
    "INTEGER": 32,
    "INT8": 64,
    "BIGINT": 64,
}


@dataclass(frozen=True)
class DatabaseErrorDetails:
    """Fields of an error reported by the PostgreSQL server."""

    message: str
    detail: Optional[str] = None
    hint: Optional[str] = None
    table: Optional[str] = None
    column: Optional[str] = None
    constraint: Optional[str] = None


def is_transient_error(message: str) -> bool:
    """True when a connection error is worth retrying."""
    text = message.lower()
    # Authentication, missing databases and TLS problems never qualify:
    # only the markers below make an error transient.
    return any(marker in text for marker in _TRANSIENT_MARKERS)


def map_connection_error(
    message: str,
    host: Optional[str],
    port: int,
    user: Optional[str],
    database: Optional[str],
) -> GlanceConnectionError:
    """Turn a raw connection failure into a user-friendly error."""
    host = host if host is not None else "localhost"
    user = user if user is not None else "unknown"
    database = database if database is not None else "unknown"
    text = message.lower()

    if "connection refused" in text or "could not connect" in text:
        return GlanceConnectionError(
            f"Cannot connect to {host}:{port}. Check that the server is running."
        )
    if "password authentication failed" in text or "authentication failed" in text:
        return GlanceConnectionError(
            f"Authentication failed for user '{user}'. Check your credentials."
        )
    if "does not exist" in text and "database" in text:
        return GlanceConnectionError(f"Database '{database}' does not exist.")
    if "ssl" in text or "tls" in text:
        return GlanceConnectionError(
            "Server requires SSL. Add '?sslmode=require' to connection string."
        )
    if "timed out" in text or "timeout" in text:
        return GlanceConnectionError(
            f"Connection to {host}:{port} timed out. "
            "The server may be overloaded or unreachable."
        )
    return GlanceConnectionError(message)


def format_query_error(error: Any) -> str:
    """Format a query failure, adding server-supplied context when present."""
    if not isinstance(error, DatabaseErrorDetails):
        return str(error)

    lines = [f"ERROR: {error.message}"]
    for label, value in (
        ("DETAIL", error.detail),
        ("HINT", error.hint),
        ("TABLE", error.table),
        ("COLUMN", error.column),
        ("CONSTRAINT", error.constraint),
    ):
        if value is not None:
            lines.append(f"  {label}: {value}")
    return "\n".join(lines)


def _to_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def convert_value(raw: Any, type_name: str) -> Value:
    """Decode a raw driver value according to its PostgreSQL type name.

    Values that cannot be decoded as the named type become NULL.
    """
    if raw is None:
        return None
    kind = type_name.upper()

    if kind in ("BOOL", "BOOLEAN"):
        return raw if isinstance(raw, bool) else None

    if kind in _INT_RANGES:
        if isinstance(raw, bool) or not isinstance(raw, int):
            return None
        bits = _INT_RANGES[kind]
        limit = 1 << (bits - 1)
        return raw if -limit <= raw < limit else None

    if kind in ("FLOAT4", "REAL"):
        if not isinstance(raw, float):
            return None
        try:
            return _to_float32(raw)
        except OverflowError:
            return None

    if kind in ("FLOAT8", "DOUBLE PRECISION"):
        return raw if isinstance(raw, float) else None

    if kind == "BYTEA":
        if isinstance(raw, (bytes, bytearray, memoryview)):
            return bytes(raw)
        return None

    return raw if isinstance(raw, str) else None


def group_indexes(rows: Iterable[Tuple[str, str, bool]]) -> List[Index]:
    """Group (index name, column name, is unique) rows into indexes."""
    grouped: Dict[str, Index] = {}
    for index_name, column_name, is_unique in rows:
        index = grouped.get(index_name)
        if index is None:
            index = grouped[index_name] = Index(
                name=index_name, columns=[], is_unique=bool(is_unique)
            )
        index.columns.append(column_name)
    return list(grouped.values())


def group_foreign_keys(
    rows: Iterable[Tuple[str, str, str, str]],
) -> List[ForeignKey]:
    """Group (from table, from column, to table, to column) rows by table pair."""
    grouped: Dict[Tuple[str, str], ForeignKey] = {}
    for from_table, from_column, to_table, to_column in rows:
        key = (from_table, to_table)
        fk = grouped.get(key)
        if fk is None:
            fk = grouped[key] = ForeignKey(
                from_table=from_table,
                from_columns=[],
                to_table=to_table,
                to_columns=[],
            )
        fk.from_columns.append(from_column)
        fk.to_columns.append(to_column)
    return list(grouped.values())


def build_query_result(
    columns: Sequence[ColumnInfo],
    rows: Sequence[Row],
    execution_time: timedelta,
) -> QueryResult:
    """Assemble a query result, keeping at most MAX_ROWS rows."""
    if not rows:
        return QueryResult().with_execution_time(execution_time)

    total_rows = len(rows)
    was_truncated = total_rows > MAX_ROWS
    if was_truncated:
        logger.warning(
            "Query returned %d rows, truncating to %d rows", total_rows, MAX_ROWS
        )

    kept = [list(row) for row in rows[:MAX_ROWS]]
    return QueryResult(
        columns=list(columns),
        rows=kept,
        execution_time=execution_time,
        row_count=len(kept),
        total_rows=total_rows,
        was_truncated=was_truncated,
    )