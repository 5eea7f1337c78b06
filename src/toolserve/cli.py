"""toolserve CLI entrypoint."""

from __future__ import annotations

import click

from toolserve import __version__


@click.group()
@click.version_option(version=__version__, prog_name="toolserve")
def main() -> None:
    """toolserve: serve schema-described tools over an MCP-style JSON-RPC protocol."""


# Register subcommands
from toolserve.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
