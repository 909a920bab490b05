"""Database schema model and its text rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class Column:
    """A column of a table."""

    name: str = ""
    data_type: str = ""
    is_nullable: bool = True
    default: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "data_type": self.data_type,
            "is_nullable": self.is_nullable,
            "default": self.default,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Column":
        default = data["default"]
        return cls(
            name=str(data["name"]),
            data_type=str(data["data_type"]),
            is_nullable=bool(data["is_nullable"]),
            default=None if default is None else str(default),
        )


@dataclass
class Index:
    """An index over one or more columns of a table."""

    name: str = ""
    columns: List[str] = field(default_factory=list)
    is_unique: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "columns": list(self.columns),
            "is_unique": self.is_unique,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Index":
        return cls(
            name=str(data["name"]),
            columns=[str(c) for c in data["columns"]],
            is_unique=bool(data["is_unique"]),
        )


@dataclass
class ForeignKey:
    """A foreign key relationship between two tables."""

    from_table: str = ""
    from_columns: List[str] = field(default_factory=list)
    to_table: str = ""
    to_columns: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "from_table": self.from_table,
            "from_columns": list(self.from_columns),
            "to_table": self.to_table,
            "to_columns": list(self.to_columns),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ForeignKey":
        return cls(
            from_table=str(data["from_table"]),
            from_columns=[str(c) for c in data["from_columns"]],
            to_table=str(data["to_table"]),
            to_columns=[str(c) for c in data["to_columns"]],
        )


@dataclass
class Table:
    """A database table with its columns, primary key and indexes."""

    name: str = ""
    columns: List[Column] = field(default_factory=list)
    primary_key: List[str] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "primary_key": list(self.primary_key),
            "indexes": [i.to_dict() for i in self.indexes],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Table":
        return cls(
            name=str(data["name"]),
            columns=[Column.from_dict(c) for c in data["columns"]],
            primary_key=[str(c) for c in data["primary_key"]],
            indexes=[Index.from_dict(i) for i in data["indexes"]],
        )


def _column_line(column: Column, annotation: str) -> str:
    parts = [annotation] if annotation else []
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    line = f"  - {column.name}: {column.data_type}"
    if parts:
        line += f" ({', '.join(parts)})"
    return line + "\n"


@dataclass
class Schema:
    """The tables and foreign keys of a database."""

    tables: List[Table] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)

    def format_for_llm(self) -> str:
        """Render the schema as text suited to a language-model prompt."""
        output = ["Database Schema:\n\n"]

        for table in self.tables:
            output.append(f"Table: {table.name}\n")
            for column in table.columns:
                annotations = []
                if column.name in table.primary_key:
                    annotations.append("PK")
                if not column.is_nullable:
                    annotations.append("NOT NULL")

                for fk in self.foreign_keys:
                    if fk.from_table == table.name and column.name in fk.from_columns:
                        target = fk.to_columns[0] if fk.to_columns else ""
                        fk_ref = f"FK -> {fk.to_table}.{target}"
                        annotation = ", ".join([*annotations, fk_ref])
                        output.append(_column_line(column, annotation))

                output.append(_column_line(column, ", ".join(annotations)))
            output.append("\n")

        if self.foreign_keys:
            output.append("Foreign Keys:\n")
            for fk in self.foreign_keys:
                output.append(
                    f"  - {fk.from_table}.{', '.join(fk.from_columns)} -> "
                    f"{fk.to_table}.{', '.join(fk.to_columns)}\n"
                )

        return "".join(output)

    def format_for_display(self) -> str:
        """Render the schema for on-screen display."""
        return self.format_for_llm()

    def to_dict(self) -> dict:
        """Serialise to plain data."""
        return {
            "tables": [t.to_dict() for t in self.tables],
            "foreign_keys": [fk.to_dict() for fk in self.foreign_keys],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Schema":
        """Rebuild a schema from the output of :meth:`to_dict`."""
        try:
            return cls(
                tables=[Table.from_dict(t) for t in data["tables"]],
                foreign_keys=[ForeignKey.from_dict(fk) for fk in data["foreign_keys"]],
            )
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r}") from exc