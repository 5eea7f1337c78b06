"""Pydantic models for the server YAML consumed by ``toolserve serve``."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, field_validator

from toolserve.server.server import DEFAULT_CAPABILITIES, ToolErrorPolicy


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerConfig(BaseModel):
    """Top-level server configuration parsed from YAML.

    ``tools`` holds import references of the form ``package.module:attribute``;
    each attribute is a tool or an iterable of tools.
    """

    name: str
    version: str = "0.1.0"
    capabilities: dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_CAPABILITIES))
    tools: list[str] = []
    tool_error_policy: ToolErrorPolicy = ToolErrorPolicy.PROTOCOL_ERROR
    metadata: dict[str, Any] = {}
    log_level: str = "WARNING"
    telemetry: TelemetrySettings | None = None

    @field_validator("tools")
    @classmethod
    def _validate_references(cls, refs: list[str]) -> list[str]:
        for ref in refs:
            module, _, attr = ref.partition(":")
            if not module or not attr:
                msg = f"tool reference {ref!r} must look like 'package.module:attribute'"
                raise ValueError(msg)
        return refs

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, level: str) -> str:
        normalized = level.upper()
        if not isinstance(logging.getLevelName(normalized), int):
            msg = f"unknown log level {level!r}"
            raise ValueError(msg)
        return normalized
