"""toolserve SDK: YAML server configuration and assembly."""

from toolserve.sdk.errors import ConfigError
from toolserve.sdk.loader import ConfigLoader, build_server, load_server, resolve_tools
from toolserve.sdk.models import ServerConfig, TelemetrySettings

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "ServerConfig",
    "TelemetrySettings",
    "build_server",
    "load_server",
    "resolve_tools",
]
