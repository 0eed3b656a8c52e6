from .route import Route
from .route_table import RouteTable, RouteTableState
from .router import Router
from .server import StreamingHTTPServer

__all__ = [
    "Route",
    "RouteTable",
    "RouteTableState",
    "Router",
    "StreamingHTTPServer",
]
