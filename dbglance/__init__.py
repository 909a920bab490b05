"""Schema models, query results, errors, PostgreSQL helpers and CLI options for a database viewer."""

__version__ = "0.1.0"