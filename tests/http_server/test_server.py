import json
import socket
import unittest
from concurrent.futures import ThreadPoolExecutor

import httpx
from testing import (
    ServerThreadContextManager,
    captured_logger,
    find_log_entries,
    log_entries,
)

from gogostream.error import ListenError, RouteTableFrozenError
from gogostream.http_server.handlers import JSONHandler, Success
from gogostream.http_server.route_table import RouteTable, RouteTableState
from gogostream.http_server.server import StreamingHTTPServer
from gogostream.views import create_route_table

CONCURRENT_REQUESTS = 32


class TestStreamingHTTPServer(unittest.TestCase):
    def setUp(self):
        self.logger, self.log_file = captured_logger()

    def test_concurrent_home_requests(self):
        with ServerThreadContextManager(
            create_route_table(self.logger), self.logger
        ) as server:

            def get_home(_) -> httpx.Response:
                return httpx.get(
                    f"{server.server.base_url}/", trust_env=False, timeout=30
                )

            with ThreadPoolExecutor(max_workers=CONCURRENT_REQUESTS) as executor:
                responses = list(executor.map(get_home, range(CONCURRENT_REQUESTS)))

        self.assertEqual(len(responses), CONCURRENT_REQUESTS)
        for response in responses:
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.content, b'"ploplop"')

        self.assertEqual(
            len(find_log_entries(self.log_file, "request served")),
            CONCURRENT_REQUESTS,
        )
        # Every log line is a whole JSON object.
        for line in self.log_file.getvalue().splitlines():
            json.loads(line)

    def test_bind_freezes_route_table(self):
        route_table = create_route_table(self.logger)
        with StreamingHTTPServer("127.0.0.1", 0, route_table, self.logger):
            self.assertEqual(route_table.state, RouteTableState.SERVING)
            with self.assertRaises(RouteTableFrozenError):
                route_table.register(
                    "GET",
                    "/late",
                    JSONHandler(lambda request: Success("late"), self.logger),
                )

    def test_bind_assigns_ephemeral_port(self):
        with StreamingHTTPServer(
            "127.0.0.1", 0, create_route_table(self.logger), self.logger
        ) as server:
            self.assertNotEqual(server.port, 0)
            self.assertEqual(server.base_url, f"http://127.0.0.1:{server.port}")

    def test_startup_line_is_logged_before_binding(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy_socket:
            busy_socket.bind(("127.0.0.1", 0))
            busy_socket.listen()
            busy_port = busy_socket.getsockname()[1]

            server = StreamingHTTPServer(
                "127.0.0.1", busy_port, create_route_table(self.logger), self.logger
            )
            with self.assertRaises(ListenError) as context:
                server.bind()

        self.assertEqual(context.exception.address, f"127.0.0.1:{busy_port}")
        events = [entry["event"] for entry in log_entries(self.log_file)]
        self.assertIn(f"Streaming on port {busy_port}", events)

    def test_serve_requires_bind(self):
        server = StreamingHTTPServer(
            "127.0.0.1", 0, RouteTable(self.logger), self.logger
        )
        with self.assertRaises(RuntimeError):
            server.serve()

    def test_serve_twice_raises(self):
        with ServerThreadContextManager(RouteTable(self.logger), self.logger) as server:
            with self.assertRaises(RuntimeError):
                server.server.serve()

    def test_stop_unbound_server_does_nothing(self):
        server = StreamingHTTPServer(
            "127.0.0.1", 0, RouteTable(self.logger), self.logger
        )
        server.stop()
        self.assertFalse(server.running)
        self.assertEqual(find_log_entries(self.log_file, "Server stopped"), [])

    def test_stop_twice_closes_once(self):
        server = StreamingHTTPServer(
            "127.0.0.1", 0, create_route_table(self.logger), self.logger
        )
        server.bind()

        server.stop()
        server.stop()

        self.assertEqual(len(find_log_entries(self.log_file, "Server stopped")), 1)

    def test_bind_after_stop_opens_new_socket(self):
        server = StreamingHTTPServer(
            "127.0.0.1", 0, create_route_table(self.logger), self.logger
        )
        server.bind()
        server.stop()

        server.bind()
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as client_socket:
                self.assertEqual(
                    client_socket.connect_ex(("127.0.0.1", server.port)), 0
                )
        finally:
            server.stop()

    def test_stop_releases_port(self):
        with ServerThreadContextManager(
            create_route_table(self.logger), self.logger
        ) as server:
            port = server.server.port

        self.assertFalse(server.server.running)
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as client_socket:
            self.assertNotEqual(client_socket.connect_ex(("127.0.0.1", port)), 0)
        self.assertEqual(len(find_log_entries(self.log_file, "Server stopped")), 1)


if __name__ == "__main__":
    unittest.main()
