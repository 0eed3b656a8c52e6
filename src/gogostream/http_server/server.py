import http.server
import socket

from structlog.typing import FilteringBoundLogger

from ..error import ListenError
from .route_table import RouteTable


class _ThreadingHTTPServer(http.server.ThreadingHTTPServer):
    request_queue_size = socket.SOMAXCONN


class StreamingHTTPServer:
    """HTTP server dispatching every connection on its own thread through the route table."""

    def __init__(
        self,
        host: str,
        port: int,
        route_table: RouteTable,
        logger: FilteringBoundLogger,
    ):
        self._host: str = host
        self._port: int = port
        self._route_table: RouteTable = route_table
        self._logger: FilteringBoundLogger = logger.bind(module=__name__)
        self._httpd: _ThreadingHTTPServer | None = None
        self._running: bool = False

    @property
    def port(self) -> int:
        """Returns the bound port, or the configured one if the server isn't bound yet."""
        if self._httpd is None:
            return self._port
        return self._httpd.server_address[1]

    @property
    def base_url(self) -> str:
        """Returns the base URL of the server."""
        return f"http://{self._host}:{self.port}"

    @property
    def running(self) -> bool:
        return self._running

    def bind(self) -> None:
        """Freezes the route table and binds the listening socket.

        Raises ListenError if the address can't be bound.
        """
        if self._httpd is not None:
            return

        self._route_table.freeze()
        self._logger.info(f"Streaming on port {self._port}", port=self._port)
        try:
            self._httpd = _ThreadingHTTPServer(
                (self._host, self._port), self._route_table
            )
        except OSError as e:
            raise ListenError(f"{self._host}:{self._port}", e) from e

    def serve(self) -> None:
        """Serves requests in the current thread.

        Blocks until the server is stopped.
        """
        if self._httpd is None:
            raise RuntimeError("Server is not bound.")
        if self._running:
            raise RuntimeError("Server is already running.")

        self._running = True
        try:
            self._httpd.serve_forever()
        finally:
            self._running = False

    def start(self) -> None:
        """Binds the listening socket and serves requests in the current thread.

        Blocks until the server is stopped.
        """
        self.bind()
        self.serve()

    def stop(self) -> None:
        """Stops the HTTP server and releases its resources.

        Blocks until the server is fully stopped.
        Does nothing if the server is not running.
        """
        if self._httpd is None:
            return

        if self._running:
            # self._running must be checked, otherwise shutdown() will deadlock.
            self._httpd.shutdown()

        self._httpd.server_close()
        self._httpd = None
        self._logger.info("Server stopped")

    def __enter__(self) -> "StreamingHTTPServer":
        self.bind()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.stop()
