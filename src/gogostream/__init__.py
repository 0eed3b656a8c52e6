from .config import ServerConfig
from .error import (
    GogostreamError,
    ListenError,
    LogFileError,
    RouteTableFrozenError,
)
from .http_server import Route, RouteTable, StreamingHTTPServer
from .http_server.handlers import (
    Failure,
    Handler,
    HandlerResult,
    JSONHandler,
    Request,
    Response,
    Success,
)
from .logger import get_logger, open_log_file

__all__ = [
    "Failure",
    "GogostreamError",
    "Handler",
    "HandlerResult",
    "JSONHandler",
    "ListenError",
    "LogFileError",
    "Request",
    "Response",
    "Route",
    "RouteTable",
    "RouteTableFrozenError",
    "ServerConfig",
    "StreamingHTTPServer",
    "Success",
    "get_logger",
    "open_log_file",
]
