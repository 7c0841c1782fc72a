"""
Custom exceptions for the research backend client.

Each exception carries an ErrorKind so the retry engine can tell
transient failures from terminal ones without inspecting classes.
"""

from research_loop.models.enums import ErrorKind
from research_loop.retry.exceptions import ClassifiableError


class BackendError(ClassifiableError):
    """
    Base exception for all research backend errors.

    Catch this to handle any failure of fetch_research / fetch_next_subject.
    """


class BackendConnectionError(BackendError):
    """
    Raised when the research service cannot be reached.

    Includes DNS failures, refused connections and dropped sockets.
    No response was received, so the request is retried.
    """
    kind = ErrorKind.TRANSPORT


class BackendTimeoutError(BackendConnectionError):
    """Raised when the research service does not answer in time."""
    kind = ErrorKind.TIMEOUT


class BackendResponseError(BackendError):
    """
    Raised when the research service answers with an error status.

    The kind is derived from the status code: 429 is rate limiting,
    408 and 5xx are server faults (retried), other 4xx are rejections
    (terminal).
    """

    def __init__(self, message: str, status_code: int, details: dict | None = None):
        super().__init__(
            message,
            details,
            status_code=status_code,
            kind=ErrorKind.from_status(status_code),
        )


class BackendPayloadError(BackendError):
    """
    Raised when a successful response is unusable.

    Examples: non-JSON body, missing or blank summary. Terminal.
    """
    kind = ErrorKind.INVALID_PAYLOAD
