"""``toolserve serve``: run a configured server over stdio."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from toolserve.cli_commands._output import LOG_LEVELS, configure_logging, console


@click.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
def serve(config: str, log_level: str | None, telemetry: bool) -> None:
    """Serve the tools described by the CONFIG yaml file on stdin/stdout."""
    from toolserve.sdk.errors import ConfigError
    from toolserve.sdk.loader import ConfigLoader, build_server
    from toolserve.sdk.models import TelemetrySettings
    from toolserve.server.transport import StdioTransport

    try:
        spec = ConfigLoader(Path(config)).load()
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    configure_logging(log_level or spec.log_level)

    if telemetry:
        if spec.telemetry is None:
            spec.telemetry = TelemetrySettings(enabled=True)
        else:
            spec.telemetry.enabled = True

    try:
        server = build_server(spec)
    except (ConfigError, ImportError) as exc:
        console.print(f"[red]Startup error:[/red] {exc}")
        sys.exit(1)

    StdioTransport(server).serve()
