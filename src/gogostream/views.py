from structlog.typing import FilteringBoundLogger

from .http_server.handlers import HandlerResult, JSONHandler, Request, Success
from .http_server.route_table import RouteTable

HOME_PATH: str = "/"
HOME_VERB: str = "GET"


def home(request: Request) -> HandlerResult:
    return Success("ploplop")


def create_route_table(logger: FilteringBoundLogger) -> RouteTable:
    """Creates the route table with all the views of the server."""
    route_table = RouteTable(logger)
    route_table.register(HOME_VERB, HOME_PATH, JSONHandler(home, logger))
    return route_table
