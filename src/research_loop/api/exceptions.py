"""
Research service API exceptions.

Raised by route handlers and mapped to {"error": message} responses by
the exception handlers.
"""


class APIError(Exception):
    """Base exception for errors returned to API clients."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(APIError):
    """Request body is missing a required field (400)."""

    status_code = 400


class UpstreamFailureError(APIError):
    """The LLM could not produce a result after retries (502)."""

    status_code = 502
