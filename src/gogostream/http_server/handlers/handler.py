from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlsplit


@dataclass
class Request:
    method: str
    # Raw request target, including the query string.
    path: str
    headers: dict[str, str]
    body: bytes
    remote_address: str = ""
    path_params: dict[str, str] = field(default_factory=dict)

    @property
    def url_path(self) -> str:
        return urlsplit(self.path).path

    @property
    def query_params(self) -> dict[str, list[str]]:
        return parse_qs(urlsplit(self.path).query)


@dataclass
class Response:
    status_code: int
    headers: dict[str, str]
    body: bytes


class Handler:
    def handle(self, request: Request) -> Response:
        """Handles an incoming HTTP request and returns a response.

        Any exception raised by the handler will result in a 500 Internal Server Error
        being returned to the client.
        """
        raise NotImplementedError("Handler subclasses must implement handle method.")
