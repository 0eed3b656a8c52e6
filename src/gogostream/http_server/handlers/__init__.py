from .handler import Handler, Request, Response
from .json_handler import JSONHandler
from .result import Failure, HandlerResult, Success

__all__ = [
    "Failure",
    "Handler",
    "HandlerResult",
    "JSONHandler",
    "Request",
    "Response",
    "Success",
]
