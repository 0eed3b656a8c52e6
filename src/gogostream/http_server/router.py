import http.server

from structlog.typing import FilteringBoundLogger

from .handlers.handler import Handler, Request, Response
from .route import Route

NOT_FOUND_BODY: bytes = b"404 page not found\n"


def _allows_body(status_code: int) -> bool:
    return status_code >= 200 and status_code not in (204, 304)


class Router(http.server.BaseHTTPRequestHandler):
    """An HTTP request handler that routes the requests to appropriate handlers based on preconfigured routes."""

    def __init__(
        self,
        gogostream_routes: dict[Route, Handler],
        gogostream_logger: FilteringBoundLogger,
        *args,
        **kwargs,
    ):
        # All self.fields must be initialized before calling super().__init__().
        # Prefix with "gogostream_" to avoid any name collisions with base class fields and constructor args
        # that we don't control.
        self._gogostream_routes: dict[Route, Handler] = gogostream_routes
        self._gogostream_logger: FilteringBoundLogger = gogostream_logger.bind(
            module=__name__
        )
        super().__init__(*args, **kwargs)

    def _find_handler(self, request: Request) -> Handler | None:
        """Finds the appropriate handler for the given request.

        Stores the matched path variables in the request.
        Doesn't raise any exceptions. Returns None if no handler is found.
        """
        url_path: str = request.url_path
        for route, handler in self._gogostream_routes.items():
            if route.verb != request.method:
                continue
            path_params: dict[str, str] | None = route.match(url_path)
            if path_params is not None:
                request.path_params = path_params
                return handler
        return None

    def _allowed_verbs(self, request: Request) -> list[str]:
        """Returns the verbs of the routes matching the request path, in registration order."""
        url_path: str = request.url_path
        verbs: list[str] = []
        for route in self._gogostream_routes:
            if route.verb not in verbs and route.match(url_path) is not None:
                verbs.append(route.verb)
        return verbs

    def _handle(self):
        try:
            content_length: int = int(self.headers.get("Content-Length", 0))
            request: Request = Request(
                method=self.command,
                path=self.path,
                headers=dict(self.headers.items()),
                body=self.rfile.read(content_length),
                remote_address=f"{self.client_address[0]}:{self.client_address[1]}",
            )
        except Exception as e:
            self._internal_server_error(e)
            return

        try:
            handler: Handler | None = self._find_handler(request)
            allowed_verbs: list[str] = (
                [] if handler is not None else self._allowed_verbs(request)
            )
        except Exception as e:
            self._internal_server_error(e)
            return

        if handler is None:
            if len(allowed_verbs) == 0:
                self._gogostream_logger.debug(
                    "No route found", verb=self.command, path=self.path
                )
                self._send(
                    Response(
                        status_code=404,
                        headers={"Content-Type": "text/plain; charset=utf-8"},
                        body=NOT_FOUND_BODY,
                    )
                )
            else:
                self._gogostream_logger.debug(
                    "Method not allowed", verb=self.command, path=self.path
                )
                self._send(
                    Response(
                        status_code=405,
                        headers={"Allow": ", ".join(allowed_verbs)},
                        body=b"",
                    )
                )
            return

        try:
            response: Response = handler.handle(request)
        except Exception as e:
            self._internal_server_error(e)
            return
        self._send(response)

    def _send(self, response: Response) -> None:
        """Writes the status line, headers and body of the response. Called once per request."""
        self.send_response(response.status_code)
        for header_name, header_value in response.headers.items():
            self.send_header(header_name, header_value)
        if not _allows_body(response.status_code):
            # 1xx, 204 and 304 responses never carry a body.
            self.end_headers()
            return
        self.send_header("Content-Length", str(len(response.body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(response.body)

    def _internal_server_error(self, exception: BaseException) -> None:
        self._gogostream_logger.error(
            "Internal Server Error",
            verb=self.command,
            path=self.path,
            exc_info=exception,
        )
        self._send(
            Response(
                status_code=500,
                headers={"Content-Type": "text/plain; charset=utf-8"},
                body=b"Internal Server Error",
            )
        )

    def do_GET(self):
        self._handle()

    def do_HEAD(self):
        self._handle()

    def do_POST(self):
        self._handle()

    def do_PUT(self):
        self._handle()

    def do_DELETE(self):
        self._handle()

    def do_PATCH(self):
        self._handle()

    def do_OPTIONS(self):
        self._handle()

    # Disable all default request logging done by BaseHTTPRequestHandler.
    def log_message(self, *args, **kwargs):
        pass

    def log_request(self, *args, **kwargs):
        pass

    def log_error(self, *args, **kwargs):
        pass
