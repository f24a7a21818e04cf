"""Typed failures raised by the AI transport layer."""

from enum import Enum


class TransportErrorKind(Enum):
    """Classification of a failed upstream call."""

    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_RESPONSE = "malformed_response"

    @property
    def http_status(self) -> int:
        """Status code an HTTP layer should answer with for this kind."""
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    TransportErrorKind.TIMEOUT: 504,
    TransportErrorKind.NETWORK_UNREACHABLE: 502,
    TransportErrorKind.UPSTREAM_ERROR: 502,
    TransportErrorKind.MALFORMED_RESPONSE: 500,
}


class TransportError(Exception):
    """Raised when a chat-completion call cannot produce a usable response."""

    kind: TransportErrorKind = TransportErrorKind.UPSTREAM_ERROR

    def __init__(self, message: str, kind: TransportErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def http_status(self) -> int:
        return self.kind.http_status


class AITimeoutError(TransportError):
    """The upstream call exceeded its deadline."""

    kind = TransportErrorKind.TIMEOUT

    def __init__(self, message: str = "Request timeout - OpenRouter API took too long to respond"):
        super().__init__(message)


class NetworkUnreachableError(TransportError):
    """The upstream host could not be resolved or refused the connection."""

    kind = TransportErrorKind.NETWORK_UNREACHABLE

    def __init__(self, message: str = "Network error - Cannot reach OpenRouter API"):
        super().__init__(message)


class UpstreamError(TransportError):
    """The upstream answered with a non-success status.

    The body is kept for diagnostics only.
    """

    kind = TransportErrorKind.UPSTREAM_ERROR

    def __init__(self, status_code: int, body: str = "", reason: str = ""):
        message = f"AI service error: {reason or 'HTTP ' + str(status_code)}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedResponseError(TransportError):
    """The upstream body was not a chat-completion JSON document."""

    kind = TransportErrorKind.MALFORMED_RESPONSE
