import json
from typing import Any, Callable

from pydantic import BaseModel
from structlog.typing import FilteringBoundLogger

from .handler import Handler, Request, Response
from .result import Failure, HandlerResult, Success

JSON_CONTENT_TYPE: str = "application/json"
TEXT_CONTENT_TYPE: str = "text/plain; charset=utf-8"

NIL_RESPONSE_BODY: bytes = b"Internal server error. Check the logs."
MARSHALLING_ERROR_BODY: bytes = b"Error marshalling JSON"


class JSONHandler(Handler):
    """Adapts a function returning a HandlerResult to the Handler interface.

    Every handler wrapped this way shares the same contract: Success payloads are
    sent as JSON with status 200, Failures as {"error": message} with their status
    code. A Success without payload or a payload that can't be encoded as JSON
    results in a 500 with a fixed plain text body.
    """

    def __init__(
        self,
        function: Callable[[Request], HandlerResult],
        logger: FilteringBoundLogger,
    ):
        self._function: Callable[[Request], HandlerResult] = function
        self._logger: FilteringBoundLogger = logger.bind(
            module=__name__, handler=getattr(function, "__name__", repr(function))
        )

    def handle(self, request: Request) -> Response:
        result: HandlerResult = self._function(request)

        if isinstance(result, Failure):
            self._logger.error(
                "request handler failed",
                error=str(result.error),
                message=result.message,
                status_code=result.status_code,
            )
            return Response(
                status_code=result.status_code,
                headers={"Content-Type": JSON_CONTENT_TYPE},
                body=_encode_json({"error": result.message}),
            )

        if not isinstance(result, Success):
            raise TypeError(
                f"Handler returned {type(result).__name__}, expected Success or Failure"
            )

        if result.payload is None:
            self._logger.error("response from handler is None")
            return _text_response(500, NIL_RESPONSE_BODY)

        try:
            body: bytes = _encode_json(result.payload)
        except (TypeError, ValueError) as e:
            self._logger.error("failed to marshal response to JSON", error=str(e))
            return _text_response(500, MARSHALLING_ERROR_BODY)

        # The access log records 200 without looking at how the write went.
        self._logger.info(
            "request served",
            remote_address=request.remote_address,
            method=request.method,
            url=request.path,
            status_code=200,
        )
        return Response(
            status_code=200,
            headers={"Content-Type": JSON_CONTENT_TYPE},
            body=body,
        )


def _encode_json(payload: Any) -> bytes:
    """Encodes the payload as compact JSON.

    Raises TypeError or ValueError if the payload isn't JSON serializable.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    return json.dumps(
        payload, separators=(",", ":"), allow_nan=False, ensure_ascii=False
    ).encode("utf-8")


def _text_response(status_code: int, body: bytes) -> Response:
    return Response(
        status_code=status_code,
        headers={"Content-Type": TEXT_CONTENT_TYPE},
        body=body,
    )
