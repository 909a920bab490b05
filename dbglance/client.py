"""Abstract interface for database clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from .schema import Schema
from .types import QueryResult


class DatabaseClient(ABC):
    """Interface every database backend implements.

    Clients are async context managers: leaving the block closes them.
    """

    @abstractmethod
    async def introspect_schema(self) -> Schema:
        """Return the tables and relationships of the database."""

    @abstractmethod
    async def execute_query(self, sql: str) -> QueryResult:
        """Run a SQL statement and return its result."""

    @abstractmethod
    async def close(self) -> None:
        """Release the connection."""

    async def __aenter__(self) -> "DatabaseClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()