"""Error hierarchy shared by every part of the application."""

from __future__ import annotations


class GlanceError(Exception):
    """Base class for all application errors.

    Each subclass carries a human-readable message and reports a
    display category.
    """

    _prefix = "Error"
    _category = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self._prefix}: {self.message}"

    def category(self) -> str:
        """Return the error category used as a display heading."""
        return self._category


class GlanceConnectionError(GlanceError):
    """Database connection failure (unreachable host, bad credentials, ...)."""

    _prefix = "Connection error"
    _category = "Connection Error"


class QueryError(GlanceError):
    """Query execution failure (syntax error, constraint violation, ...)."""

    _prefix = "Query error"
    _category = "Query Error"


class LlmError(GlanceError):
    """Language-model API failure (rate limit, auth, timeout, ...)."""

    _prefix = "LLM error"
    _category = "LLM Error"


class ConfigError(GlanceError):
    """Invalid or incomplete configuration."""

    _prefix = "Configuration error"
    _category = "Configuration Error"


class InternalError(GlanceError):
    """Unexpected internal state."""

    _prefix = "Internal error"
    _category = "Internal Error"