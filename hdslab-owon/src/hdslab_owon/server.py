"""TCP server exposing an HDS200 emulator for external VISA/telnet tools.

Wraps any ``ScpiTransport`` and serves it over TCP. Text replies are sent
newline-terminated; replies to block queries (``:DAT:WAV:...``) are framed
as IEEE 488.2 definite-length blocks.

Example:
    Start an emulator server on an ephemeral port::

        from hdslab_owon import make_hds2102s_emulator, EmulatorServer

        emulator = make_hds2102s_emulator()
        server = EmulatorServer(emulator, port=0)
        server.start()

        host, port = server.address
        print(f"Connect via: TCPIP::{host}::{port}::SOCKET")

        server.stop()
"""

from __future__ import annotations

import logging
import socketserver
import threading
from typing import Any

from hdslab_scpi import ScpiTransport, format_block

logger = logging.getLogger(__name__)

BLOCK_QUERY_PREFIXES: tuple[str, ...] = (":DAT:WAV:",)


class _ScpiRequestHandler(socketserver.StreamRequestHandler):
    """Handle one TCP connection, forwarding lines to the transport."""

    server: _ScpiTcpServer

    def handle(self) -> None:
        for raw_line in self.rfile:
            line = raw_line.decode("ascii").strip()
            if not line:
                continue
            transport = self.server.transport
            with self.server.lock:
                transport.write(line)
                if "?" not in line:
                    continue
                if line.upper().startswith(BLOCK_QUERY_PREFIXES):
                    reply = format_block(transport.read_raw()) + b"\n"
                else:
                    reply = (transport.read() + "\n").encode("utf-8")
            self.wfile.write(reply)
            self.wfile.flush()


class _ScpiTcpServer(socketserver.ThreadingTCPServer):
    """TCP server holding the transport shared by all client connections."""

    allow_reuse_address = True
    daemon_threads = True

    def __init__(
        self,
        server_address: tuple[str, int],
        transport: ScpiTransport,
        **kwargs: Any,
    ) -> None:
        self.transport = transport
        self.lock = threading.Lock()
        super().__init__(server_address, _ScpiRequestHandler, **kwargs)


class EmulatorServer:
    """TCP server wrapping any ``ScpiTransport`` for external access.

    Runs in a background daemon thread. Each client connection is handled
    on its own thread; transport access is serialized.

    Args:
        transport: The transport (typically an emulator) to serve.
        host: Bind address (default ``"127.0.0.1"``).
        port: Bind port (default ``5025``). Use ``0`` for an OS-assigned
            ephemeral port.
    """

    def __init__(
        self,
        transport: ScpiTransport,
        host: str = "127.0.0.1",
        port: int = 5025,
    ) -> None:
        self._server = _ScpiTcpServer((host, port), transport)
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start serving in a daemon thread."""
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info("Emulator server listening on %s:%d", *self.address)

    def stop(self) -> None:
        """Shut down the server and wait for the thread to exit."""
        self._server.shutdown()
        if self._thread is not None:
            self._thread.join()
        self._server.server_close()
        logger.info("Emulator server stopped")

    @property
    def address(self) -> tuple[str, int]:
        """Return the actual bound ``(host, port)`` address."""
        addr = self._server.server_address
        return (str(addr[0]), int(addr[1]))
