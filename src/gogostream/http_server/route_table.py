import threading
from enum import Enum

from structlog.typing import FilteringBoundLogger

from ..error import RouteTableFrozenError
from .handlers.handler import Handler
from .route import Route
from .router import Router


class RouteTableState(Enum):
    UNCONFIGURED = 1
    SERVING = 2


class RouteTable:
    """Routes registered at startup, read-only once the server starts serving.

    The table is the request handler factory of the HTTP server: the server calls it
    once per connection to create a Router that dispatches the request.
    """

    def __init__(self, logger: FilteringBoundLogger):
        self._logger: FilteringBoundLogger = logger.bind(module=__name__)
        # Insertion ordered, routes are tried in registration order.
        self._routes: dict[Route, Handler] = {}
        self._state: RouteTableState = RouteTableState.UNCONFIGURED
        self._lock: threading.Lock = threading.Lock()

    @property
    def state(self) -> RouteTableState:
        return self._state

    @property
    def routes(self) -> dict[Route, Handler]:
        return dict(self._routes)

    def register(self, verb: str, path: str, handler: Handler) -> None:
        """Registers the handler for the verb and path pattern.

        Registering the same verb and path again replaces the previous handler.
        Raises RouteTableFrozenError if the table is already serving.
        """
        with self._lock:
            if self._state == RouteTableState.SERVING:
                raise RouteTableFrozenError(verb, path)
            route = Route(verb=verb.upper(), path=path)
            if route in self._routes:
                self._logger.warning(
                    "replacing handler of registered route",
                    verb=route.verb,
                    path=route.path,
                )
            self._routes[route] = handler

    def freeze(self) -> None:
        """Switches the table to the serving state. Does nothing if already serving."""
        with self._lock:
            self._state = RouteTableState.SERVING

    def __call__(self, *args, **kwargs) -> Router:
        # This method is called by ThreadingHTTPServer to create a request handler
        # for every connection, from the connection's thread. The routes are never
        # mutated while serving, so the Routers share them without locking.
        return Router(self._routes, self._logger, *args, **kwargs)
