"""Errors raised by companion transports."""


class TransportError(Exception):
    """A companion service call failed.

    Covers connection failures, timeouts, non-success status codes and
    malformed response bodies. The underlying exception is chained as
    ``__cause__`` and also available as ``cause``.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.cause = cause
        self.status_code = status_code
