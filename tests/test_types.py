from datetime import timedelta

import pytest

from dbglance.types import ColumnInfo, QueryResult, display_value


def test_value_display():
    assert display_value(None) == "NULL"
    assert display_value(True) == "true"
    assert display_value(42) == "42"
    assert display_value(2.71) == "2.71"
    assert display_value("hello") == "hello"
    assert display_value(bytes([1, 2, 3])) == "<3 bytes>"


def test_value_display_strings():
    assert display_value(None) == "NULL"
    assert display_value(True) == "true"
    assert display_value(False) == "false"
    assert display_value(42) == "42"
    assert display_value(-100) == "-100"
    assert display_value(3.14) == "3.14"
    assert display_value("hello") == "hello"
    assert display_value(b"\x01\x02\x03") == "<3 bytes>"


@pytest.mark.parametrize(
    "value, expected",
    [
        (1.0, "1"),
        (-0.0, "-0"),
        (1e20, "100000000000000000000"),
        (0.5, "0.5"),
        (float("nan"), "NaN"),
        (float("inf"), "inf"),
        (float("-inf"), "-inf"),
    ],
)
def test_float_display(value, expected):
    assert display_value(value) == expected


def test_query_result_new():
    result = QueryResult()
    assert result.is_empty()
    assert result.row_count == 0
    assert result.execution_time == timedelta(0)
    assert result.truncation_warning() is None


def test_query_result_with_data():
    columns = [ColumnInfo("id", "integer"), ColumnInfo("name", "varchar")]
    rows = [[1, "Alice"], [2, "Bob"]]

    result = QueryResult.with_data(columns, rows)

    assert not result.is_empty()
    assert result.row_count == 2
    assert result.total_rows == 2
    assert len(result.columns) == 2
    assert len(result.rows) == 2
    assert result.was_truncated is False


def test_query_result_with_execution_time():
    result = QueryResult().with_execution_time(timedelta(milliseconds=100))
    assert result.execution_time == timedelta(milliseconds=100)


def test_column_info_new():
    col = ColumnInfo("email", "varchar(255)")
    assert col.name == "email"
    assert col.data_type == "varchar(255)"


def test_truncation_warning():
    result = QueryResult(row_count=1000, total_rows=2500, was_truncated=True)
    assert result.truncation_warning() == "⚠ Result truncated: showing 1000 of 2500 rows"


def test_truncation_warning_without_total_uses_row_count():
    result = QueryResult(row_count=1000, total_rows=None, was_truncated=True)
    assert result.truncation_warning() == "⚠ Result truncated: showing 1000 of 1000 rows"


def test_to_dict_encoding():
    result = QueryResult.with_data(
        [ColumnInfo("a", "int4")], [[1, None, True, 1.5, "x", b"\x07"]]
    ).with_execution_time(timedelta(milliseconds=100))
    data = result.to_dict()
    assert data["execution_time"] == 100_000_000
    assert data["rows"] == [
        [{"Int": 1}, "Null", {"Bool": True}, {"Float": 1.5}, {"String": "x"}, {"Bytes": [7]}]
    ]
    assert data["columns"] == [{"name": "a", "data_type": "int4"}]


def test_dict_round_trip():
    original = QueryResult(
        columns=[ColumnInfo("id", "int8"), ColumnInfo("blob", "bytea")],
        rows=[[1, b"ab"], [None, b""]],
        execution_time=timedelta(seconds=2, microseconds=5),
        row_count=2,
        total_rows=5,
        was_truncated=True,
    )
    assert QueryResult.from_dict(original.to_dict()) == original


def test_from_dict_defaults_was_truncated():
    data = QueryResult.with_data([], []).to_dict()
    del data["was_truncated"]
    assert QueryResult.from_dict(data).was_truncated is False


def test_from_dict_missing_field():
    data = QueryResult().to_dict()
    del data["row_count"]
    with pytest.raises(ValueError, match="row_count"):
        QueryResult.from_dict(data)


def test_from_dict_unknown_variant():
    data = QueryResult().to_dict()
    data["rows"] = [[{"Decimal": "1.0"}]]
    with pytest.raises(ValueError):
        QueryResult.from_dict(data)