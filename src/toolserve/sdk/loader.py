"""Config loading and server assembly for the toolserve SDK."""

from __future__ import annotations

import importlib
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from toolserve.sdk.errors import ConfigError
from toolserve.sdk.models import ServerConfig
from toolserve.server.server import Server
from toolserve.tools.base import ToolDefinition
from toolserve.utils.telemetry import configure_telemetry


class ConfigLoader:
    """Load and validate a server YAML file into a :class:`ServerConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ServerConfig:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.

        Raises:
            ConfigError: On unreadable files, YAML errors or schema violations.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Server config YAML must be a mapping")

        try:
            return ServerConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def resolve_tools(reference: str) -> list[ToolDefinition]:
    """Import ``package.module:attribute`` and return the tool(s) it names."""
    module_name, _, attr = reference.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import {module_name!r} for tool reference {reference!r}: {exc}") from exc

    try:
        target: Any = getattr(module, attr)
    except AttributeError as exc:
        raise ConfigError(f"Module {module_name!r} has no attribute {attr!r}") from exc

    if isinstance(target, ToolDefinition):
        return [target]
    if isinstance(target, Iterable) and not isinstance(target, (str, bytes)):
        tools = list(target)
        for item in tools:
            if not isinstance(item, ToolDefinition):
                raise ConfigError(f"{reference!r} contains a non-tool object: {item!r}")
        return tools
    raise ConfigError(f"{reference!r} is neither a tool nor an iterable of tools")


def build_server(config: ServerConfig) -> Server:
    """Create a :class:`Server` from *config* with all referenced tools registered."""
    if config.telemetry is not None and config.telemetry.enabled:
        configure_telemetry(
            service_name=config.name,
            otlp_endpoint=config.telemetry.otlp_endpoint,
        )

    server = Server(
        config.name,
        config.version,
        capabilities=config.capabilities,
        tool_error_policy=config.tool_error_policy,
        metadata=config.metadata,
    )
    for reference in config.tools:
        server.register_tools(*resolve_tools(reference))
    return server


def load_server(path: str | Path) -> tuple[ServerConfig, Server]:
    """Load the YAML at *path* and build the server it describes."""
    config = ConfigLoader(Path(path)).load()
    return config, build_server(config)
