"""``toolserve tools``: inspect the tools a config file registers."""

from __future__ import annotations

import json
import sys

import click

from toolserve.cli_commands._output import console, print_tools_table


@click.group()
def tools() -> None:
    """Inspect configured tools."""


@tools.command("list")
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list payload as JSON.")
def list_tools(config: str, as_json: bool) -> None:
    """List the tools registered by the CONFIG yaml file."""
    from toolserve.sdk.errors import ConfigError
    from toolserve.sdk.loader import load_server

    try:
        _, server = load_server(config)
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    rendered = [server.render_tool(tool) for tool in server.registry.list()]

    if as_json:
        click.echo(json.dumps({"tools": rendered}, indent=2))
        return

    if not rendered:
        console.print("[yellow]No tools registered.[/yellow]")
        return

    print_tools_table(rendered)
