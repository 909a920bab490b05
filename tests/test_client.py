import pytest

from dbglance.client import DatabaseClient
from dbglance.errors import QueryError
from dbglance.schema import Schema, Table
from dbglance.types import ColumnInfo, QueryResult


class MemoryClient(DatabaseClient):
    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self.closed = False
        self.executed = []

    async def introspect_schema(self) -> Schema:
        return self.schema

    async def execute_query(self, sql: str) -> QueryResult:
        if self.closed:
            raise QueryError("closed")
        self.executed.append(sql)
        return QueryResult.with_data([ColumnInfo("num", "INT4")], [[1]])

    async def close(self) -> None:
        self.closed = True


def test_abstract_client_cannot_be_instantiated():
    with pytest.raises(TypeError):
        DatabaseClient()


@pytest.mark.asyncio
async def test_context_manager_returns_client_and_closes():
    client = MemoryClient(Schema(tables=[Table("users")]))
    async with client as entered:
        assert entered is client
        assert client.closed is False
        schema = await entered.introspect_schema()
        assert [t.name for t in schema.tables] == ["users"]
    assert client.closed is True


@pytest.mark.asyncio
async def test_context_manager_closes_on_error():
    client = MemoryClient(Schema())
    with pytest.raises(RuntimeError):
        async with client:
            raise RuntimeError("boom")
    assert client.closed is True


@pytest.mark.asyncio
async def test_execute_query_through_interface():
    client = MemoryClient(Schema())
    async with client:
        result = await client.execute_query("SELECT 1 as num")
    assert result.row_count == 1
    assert result.columns[0].name == "num"
    assert client.executed == ["SELECT 1 as num"]
    with pytest.raises(QueryError):
        await client.execute_query("SELECT 1")