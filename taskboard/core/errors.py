"""Error classification for remote task store and key-value store failures."""

from enum import Enum

import httpx


class ErrorCategory(Enum):
    """Categories of failures that can occur when talking to the task store."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


class TaskStoreError(Exception):
    """Raised by the task store client when a remote operation fails.

    Any transport error, non-success status or undecodable body is a failure;
    the board engine treats every category the same way (go offline), the
    category only enriches logs.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.category = category
        self.status_code = status_code


_SERVER_ERROR_START = 500


def classify_status(status_code: int) -> ErrorCategory:
    """Map a non-success HTTP status code to an error category."""
    if status_code >= _SERVER_ERROR_START:
        return ErrorCategory.SERVER_ERROR
    return ErrorCategory.CLIENT_ERROR


def classify_store_error(exception: Exception) -> ErrorCategory:
    """Classify an exception raised while calling the task store.

    Args:
        exception: The exception raised by httpx or while decoding the response

    Returns:
        The matching ErrorCategory
    """
    if isinstance(exception, TaskStoreError):
        return exception.category
    if isinstance(exception, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT
    if isinstance(exception, httpx.HTTPStatusError):
        return classify_status(exception.response.status_code)
    if isinstance(exception, httpx.TransportError | ConnectionError):
        return ErrorCategory.NETWORK_ERROR
    if isinstance(exception, ValueError):
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        return ErrorCategory.INVALID_RESPONSE
    return ErrorCategory.UNKNOWN
