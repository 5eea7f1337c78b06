"""SDK error types."""

from __future__ import annotations

from toolserve.errors import ToolserveError


class ConfigError(ToolserveError):
    """Raised when a server config file fails parsing, validation or tool import."""
