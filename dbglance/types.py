"""Query result types and value formatting."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import timedelta
from decimal import Decimal
from typing import Any, List, Optional, Union

Value = Union[None, bool, int, float, str, bytes]
Row = List[Value]


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def display_value(value: Value) -> str:
    """Render a database value as text for display."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(value)} bytes>"
    return str(value)


def _encode_value(value: Value) -> Any:
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return {"Bool": value}
    if isinstance(value, int):
        return {"Int": value}
    if isinstance(value, float):
        return {"Float": value}
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {"Bytes": list(bytes(value))}
    if isinstance(value, str):
        return {"String": value}
    raise TypeError(f"unsupported value type: {type(value).__name__}")


def _decode_value(data: Any) -> Value:
    if data == "Null":
        return None
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"invalid encoded value: {data!r}")
    (tag, payload), = data.items()
    if tag == "Bool":
        return bool(payload)
    if tag == "Int":
        return int(payload)
    if tag == "Float":
        return float(payload)
    if tag == "String":
        return str(payload)
    if tag == "Bytes":
        return bytes(payload)
    raise ValueError(f"unknown value variant: {tag!r}")


def _timedelta_to_nanos(duration: timedelta) -> int:
    return (
        (duration.days * 86_400 + duration.seconds) * 1_000_000 + duration.microseconds
    ) * 1_000


@dataclass
class ColumnInfo:
    """Name and data type of a column in a result set."""

    name: str = ""
    data_type: str = ""


@dataclass
class QueryResult:
    """Rows and column metadata produced by executing a query."""

    columns: List[ColumnInfo] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    execution_time: timedelta = field(default_factory=timedelta)
    row_count: int = 0
    total_rows: Optional[int] = None
    was_truncated: bool = False

    @classmethod
    def with_data(cls, columns: List[ColumnInfo], rows: List[Row]) -> "QueryResult":
        """Build an untruncated result from columns and rows."""
        rows = list(rows)
        return cls(
            columns=list(columns),
            rows=rows,
            execution_time=timedelta(0),
            row_count=len(rows),
            total_rows=len(rows),
            was_truncated=False,
        )

    def with_execution_time(self, duration: timedelta) -> "QueryResult":
        """Return a copy with the given execution time."""
        return replace(self, execution_time=duration)

    def is_empty(self) -> bool:
        """True when the result holds no rows."""
        return not self.rows

    def truncation_warning(self) -> Optional[str]:
        """Warning text if the result was cut short, else None."""
        if not self.was_truncated:
            return None
        total = self.total_rows if self.total_rows is not None else self.row_count
        return f"⚠ Result truncated: showing {self.row_count} of {total} rows"

    def to_dict(self) -> dict:
        """Serialise to plain data; the execution time is in nanoseconds."""
        return {
            "columns": [
                {"name": c.name, "data_type": c.data_type} for c in self.columns
            ],
            "rows": [[_encode_value(v) for v in row] for row in self.rows],
            "execution_time": _timedelta_to_nanos(self.execution_time),
            "row_count": self.row_count,
            "total_rows": self.total_rows,
            "was_truncated": self.was_truncated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QueryResult":
        """Rebuild a result from the output of :meth:`to_dict`."""
        try:
            columns = [
                ColumnInfo(name=c["name"], data_type=c["data_type"])
                for c in data["columns"]
            ]
            rows = [[_decode_value(v) for v in row] for row in data["rows"]]
            nanos = int(data["execution_time"])
            row_count = int(data["row_count"])
            total_rows = data["total_rows"]
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r}") from exc
        return cls(
            columns=columns,
            rows=rows,
            execution_time=timedelta(microseconds=nanos // 1_000),
            row_count=row_count,
            total_rows=None if total_rows is None else int(total_rows),
            was_truncated=bool(data.get("was_truncated", False)),
        )