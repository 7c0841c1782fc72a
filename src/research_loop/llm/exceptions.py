"""
Custom exceptions for the LLM client layer.

These exceptions carry an ErrorKind so the retry engine can decide
whether a failed generation is worth repeating.
"""

from research_loop.models.enums import ErrorKind
from research_loop.retry.exceptions import ClassifiableError


class LLMClientError(ClassifiableError):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to connect to the LLM inference server.

    Includes network errors, DNS failures, refused connections.
    Retried with backoff.
    """
    kind = ErrorKind.TRANSPORT


class LLMTimeoutError(LLMConnectionError):
    """Raised when generation exceeds the timeout threshold."""
    kind = ErrorKind.TIMEOUT


class LLMGenerationError(LLMClientError):
    """
    Raised when the LLM server fails during generation.

    Examples:
    - GPU out of memory (5xx)
    - Empty response
    - Generation interrupted

    Treated as a server fault unless a status code says otherwise.
    """
    kind = ErrorKind.SERVER_FAULT


class LLMRateLimitError(LLMClientError):
    """Raised when the LLM server rate-limits the request."""
    kind = ErrorKind.RATE_LIMITED


class LLMRequestError(LLMClientError):
    """
    Raised when the LLM server rejects the request (4xx).

    Not retried: sending the same request again cannot succeed.
    """
    kind = ErrorKind.CLIENT_REJECTED


class LLMModelNotAvailableError(LLMRequestError):
    """Raised when the requested model is not available on the server."""


class LLMSchemaViolationError(LLMClientError):
    """
    Raised when LLM output doesn't conform to the requested schema.

    Not retried.
    """
    kind = ErrorKind.INVALID_PAYLOAD
