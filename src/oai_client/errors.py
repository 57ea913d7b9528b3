"""Error taxonomy for the OpenAI-compatible client."""

from enum import Enum
from typing import Optional


class OpenAIClientError(Exception):
    """Base class for every error raised by the client."""


class ConfigError(OpenAIClientError):
    """Missing or invalid client configuration."""


class TransportError(OpenAIClientError):
    """Connection, DNS, TLS or timeout failure before a response arrived."""


class ResponseReadError(TransportError):
    """The response status arrived but the body could not be read."""


class DecodeError(OpenAIClientError):
    """The response body is not valid JSON or has the wrong shape."""


class ApiErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    TOO_MANY_REQUESTS = "too_many_requests"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    GATEWAY_TIMEOUT = "gateway_timeout"
    UNKNOWN = "unknown"


STATUS_KINDS = {
    400: ApiErrorKind.BAD_REQUEST,
    401: ApiErrorKind.UNAUTHORIZED,
    403: ApiErrorKind.FORBIDDEN,
    404: ApiErrorKind.NOT_FOUND,
    429: ApiErrorKind.TOO_MANY_REQUESTS,
    500: ApiErrorKind.INTERNAL_SERVER_ERROR,
    503: ApiErrorKind.SERVICE_UNAVAILABLE,
    504: ApiErrorKind.GATEWAY_TIMEOUT,
}


class ApiError(OpenAIClientError):
    """
    Non-success HTTP status returned by the API.

    Attributes:
        kind: ApiErrorKind derived from the status code
        status_code: The raw HTTP status
        body: Raw response text, kept for diagnostics and never JSON-decoded
    """

    def __init__(self, kind: ApiErrorKind, status_code: int, body: Optional[str] = None):
        self.kind = kind
        self.status_code = status_code
        self.body = body
        super().__init__(f"API returned {status_code} ({kind.value})")


def error_for_status(status_code: int, body: Optional[str] = None) -> ApiError:
    """Map an HTTP status to an ApiError, UNKNOWN for anything not in the table."""
    kind = STATUS_KINDS.get(status_code, ApiErrorKind.UNKNOWN)
    return ApiError(kind, status_code, body)
