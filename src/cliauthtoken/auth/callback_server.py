"""Local HTTP server that captures the token from the browser redirect.

The server binds an ephemeral port on the configured listen address,
answers on a single route and hands the extracted token to a
:class:`~cliauthtoken.auth.synchronizer.SessionSynchronizer`. It lives for
exactly one flow invocation:

``CREATED -> LISTENING -> TOKEN_CAPTURED -> SHUTTING_DOWN -> CLOSED``

Requests are served on per-connection daemon threads so that an idle
speculative connection from the browser never holds up the real callback.
"""

from __future__ import annotations

import enum
import socket
import socketserver
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

from cliauthtoken.auth.synchronizer import SessionSynchronizer
from cliauthtoken.exceptions import (
    ErrorKind,
    ListenerUnavailableError,
    ResponseWriteError,
)
from cliauthtoken.models import AuthTokenConfig, default_callback_value
from cliauthtoken.output import OutputManager


class ServerState(str, enum.Enum):
    CREATED = "created"
    LISTENING = "listening"
    TOKEN_CAPTURED = "token_captured"
    SHUTTING_DOWN = "shutting_down"
    CLOSED = "closed"


def parse_callback_query(query: str, output: OutputManager) -> dict[str, list[str]]:
    """Parse a callback query string, best effort.

    A malformed query is logged and parsed again leniently, so whatever
    well-formed fields it contains are still returned.
    """
    if not query:
        return {}
    try:
        return parse_qs(query, keep_blank_values=True, strict_parsing=True)
    except ValueError as exc:
        output.debug(f"{ErrorKind.QUERY_PARSE_FAILURE.value}: {exc}")
        return parse_qs(query, keep_blank_values=True)


def path_matches(pattern: str, path: str) -> bool:
    """Return True if *path* is served by the route *pattern*.

    A pattern ending in ``/`` matches its whole subtree, so the default
    ``/`` route answers every path.
    """
    if pattern.endswith("/"):
        return path.startswith(pattern)
    return path == pattern


class _CallbackHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    block_on_close = False

    def __init__(self, owner: CallbackServer, address: tuple[str, int]) -> None:
        self.owner = owner
        if ":" in address[0]:
            self.address_family = socket.AF_INET6
        super().__init__(address, CallbackRequestHandler)

    def server_bind(self) -> None:
        # HTTPServer.server_bind resolves the FQDN of the bind address,
        # which can stall on hosts with slow reverse DNS.
        socketserver.TCPServer.server_bind(self)
        host, port = self.server_address[:2]
        self.server_name = host
        self.server_port = port

    def handle_error(self, request: Any, client_address: Any) -> None:
        self.owner.output.debug(f"Error handling callback from {client_address}")


class CallbackRequestHandler(BaseHTTPRequestHandler):
    """Answers the browser redirect and publishes the token."""

    server: _CallbackHTTPServer

    def do_GET(self) -> None:
        owner = self.server.owner
        config = owner.config
        parts = urlsplit(self.path)

        if not path_matches(config.callback_path, parts.path):
            try:
                self.send_error(404)
            except OSError as exc:
                owner.output.debug(f"Error writing 404 response: {exc}")
            return

        params = parse_callback_query(parts.query, owner.output)
        session = params.get(config.callback_query_parameter, [""])[0]

        body = config.callback_success_page.encode("utf-8")
        try:
            self.send_response(200)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            self.wfile.flush()
        except OSError as exc:
            owner.output.debug(f"{ErrorKind.RESPONSE_WRITE_FAILURE.value}: {exc}")
            owner.publish(ResponseWriteError(f"Error writing callback page: {exc}"))
            return

        owner.output.debug(f"Received redirect with session: {session}")
        owner.publish(session)

    def do_POST(self) -> None:
        # Answered like GET; the token is read from the query string only.
        length = int(self.headers.get("Content-Length") or 0)
        if length > 0:
            self.rfile.read(length)
        self.do_GET()

    def log_message(self, format: str, *args: Any) -> None:
        self.server.owner.output.debug(f"{self.address_string()} - {format % args}")


class CallbackServer:
    """Ephemeral listener plus single-route HTTP responder for one flow.

    Args:
        config: Flow configuration (listen address, route, query
            parameter, success page).
        synchronizer: Where captured tokens are published.
        output: Logging sink for diagnostics.
    """

    def __init__(
        self,
        config: AuthTokenConfig,
        synchronizer: SessionSynchronizer,
        output: OutputManager,
    ) -> None:
        self.config = config
        self.synchronizer = synchronizer
        self.output = output
        self._httpd: Optional[_CallbackHTTPServer] = None
        self._thread: Optional[threading.Thread] = None
        self._state = ServerState.CREATED
        self._lock = threading.Lock()

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def address(self) -> tuple[str, int]:
        """The bound ``(host, port)``."""
        if self._httpd is None:
            raise RuntimeError("CallbackServer has not been started")
        host, port = self._httpd.server_address[:2]
        return host, port

    @property
    def url(self) -> str:
        return default_callback_value(self.address)

    def start(self) -> None:
        """Bind the ephemeral port and serve on a background thread.

        Raises:
            ListenerUnavailableError: If the port cannot be bound.
        """
        try:
            self._httpd = _CallbackHTTPServer(self, (self.config.listen_addr, 0))
        except OSError as exc:
            raise ListenerUnavailableError(
                f"Error opening listener on {self.config.listen_addr}: {exc}"
            ) from exc

        self._state = ServerState.LISTENING
        self._thread = threading.Thread(
            target=self._serve,
            args=(self._httpd,),
            name="cliauthtoken-callback",
            daemon=True,
        )
        self._thread.start()
        self.output.debug(f"Callback server listening on {self.url}")

    def _serve(self, httpd: _CallbackHTTPServer) -> None:
        try:
            httpd.serve_forever(poll_interval=self.config.shutdown_poll_interval)
        except Exception as exc:
            # Only expected while the listener is torn down.
            self.output.debug(f"Error during serve_forever(): {exc}")

    def publish(self, value: str | BaseException) -> None:
        """Mark the capture and hand *value* to the synchronizer."""
        with self._lock:
            if self._state == ServerState.LISTENING:
                self._state = ServerState.TOKEN_CAPTURED
        if not self.synchronizer.publish(value):
            self.output.debug("Callback ignored, a session was already delivered")

    def shutdown(self) -> None:
        """Stop serving and release the listening socket. Idempotent."""
        with self._lock:
            if self._state in (ServerState.SHUTTING_DOWN, ServerState.CLOSED):
                return
            self._state = ServerState.SHUTTING_DOWN

        self.synchronizer.close()
        try:
            if self._httpd is not None:
                self._httpd.shutdown()
                self._httpd.server_close()
            if self._thread is not None:
                self._thread.join(timeout=5)
                if self._thread.is_alive():
                    self.output.warning("Callback server thread did not stop within 5 seconds")
        finally:
            self._state = ServerState.CLOSED
        self.output.debug("Callback server closed")

    def shutdown_quietly(self) -> None:
        """Like :meth:`shutdown`, but a failure is logged and never raised.

        Used on paths where another outcome (the token, or the error that
        ended the flow) must reach the caller unchanged.
        """
        try:
            self.shutdown()
        except Exception as exc:
            self.output.debug(f"{ErrorKind.SHUTDOWN_FAILURE.value}: {exc}")

    def shutdown_async(self) -> threading.Thread:
        """Run :meth:`shutdown_quietly` on a daemon thread and return immediately."""
        thread = threading.Thread(
            target=self.shutdown_quietly, name="cliauthtoken-shutdown", daemon=True
        )
        thread.start()
        return thread
