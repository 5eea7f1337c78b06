"""Stdio transport: newline-delimited JSON over stdin/stdout.

The transport owns framing only: it hands each inbound line to
:meth:`Server.handle_request` and writes whatever envelope the server emits
through its sink as one JSON line.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from toolserve.server.server import Server

logger = logging.getLogger(__name__)


class StdioTransport:
    """Serves a :class:`Server` over a pair of text streams.

    Installs itself as the server's sink on construction.

    Usage::

        StdioTransport(server).serve()   # blocks until stdin reaches EOF
    """

    def __init__(
        self,
        server: Server,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._server = server
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._closed = False
        server.sink = self.send

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, envelope: dict[str, Any]) -> None:
        """Write one envelope as a JSON line."""
        if self._closed:
            return
        try:
            self._stdout.write(json.dumps(envelope, default=str) + "\n")
            self._stdout.flush()
        except (BrokenPipeError, OSError) as exc:
            self._closed = True
            logger.warning("Stdio transport closed while sending: %s", exc)

    def serve(self) -> int:
        """Read and handle messages until EOF; returns the count handled."""
        handled = 0
        for line in self._stdin:
            if self._closed:
                break
            if not line.strip():
                continue
            self._server.handle_request(line)
            handled += 1
        self._closed = True
        logger.info("Stdio transport finished after %d message(s)", handled)
        return handled
