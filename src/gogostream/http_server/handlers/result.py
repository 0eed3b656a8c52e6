from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Success:
    """The handler produced a payload to send back as JSON."""

    payload: Any


@dataclass(frozen=True)
class Failure:
    """The handler failed; the client gets {"error": message} with the status code."""

    error: BaseException | None
    message: str
    status_code: int


HandlerResult = Success | Failure
