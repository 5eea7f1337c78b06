"""Shared CLI output helpers.

Everything goes to stderr: when serving, stdout belongs to the protocol.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console(stderr=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: str) -> None:
    """Route toolserve's loggers through a rich handler on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print rendered ``tools/list`` entries as a table."""
    table = Table(title="Registered Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Arguments")
    table.add_column("Annotations")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        required = set(schema.get("required", []))
        args = ", ".join(
            f"{key}*" if key in required else key for key in schema.get("properties", {})
        )
        hints = ", ".join(f"{k}={v}" for k, v in tool.get("annotations", {}).items())
        table.add_row(
            tool.get("name", "?"),
            _truncate(tool.get("description", "")),
            args or "-",
            hints or "-",
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
