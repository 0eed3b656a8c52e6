"""Exception hierarchy for gogostream."""


class GogostreamError(Exception):
    """Base exception for all gogostream errors."""

    pass


class LogFileError(GogostreamError):
    """Raised when the log file can't be opened for appending."""

    def __init__(self, path: str, cause: BaseException):
        self._path = path
        super().__init__(f"Error while log output: {cause}")

    @property
    def path(self) -> str:
        return self._path


class ListenError(GogostreamError):
    """Raised when the HTTP listener can't bind its address."""

    def __init__(self, address: str, cause: BaseException):
        self._address = address
        super().__init__(f"Failed to listen on {address}: {cause}")

    @property
    def address(self) -> str:
        return self._address


class RouteTableFrozenError(GogostreamError):
    """Raised when a route is registered after the server started serving."""

    def __init__(self, verb: str, path: str):
        super().__init__(
            f"Can't register route {verb} {path}: the route table is already serving"
        )
