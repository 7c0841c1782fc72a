"""
Retry engine exceptions.

ClassifiableError is the base for every error raised at a backend
boundary: it carries an ErrorDescriptor so the retry classifier can
decide without inspecting exception classes.
"""

from typing import TYPE_CHECKING, Any, Optional

from research_loop.models.enums import ErrorKind

if TYPE_CHECKING:
    from research_loop.retry.classifier import ErrorDescriptor


class ClassifiableError(Exception):
    """
    Base exception for errors that describe their own failure kind.

    Subclasses set `kind` as a class attribute; the HTTP status code, when
    one was received, is passed explicitly and may refine the kind.

    Attributes:
        message: Human-readable error message
        details: Structured context for logging
        status_code: HTTP status code received, if any
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        *,
        status_code: Optional[int] = None,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        if kind is not None:
            self.kind = kind

    @property
    def descriptor(self) -> "ErrorDescriptor":
        from research_loop.retry.classifier import ErrorDescriptor

        return ErrorDescriptor(kind=self.kind, status_code=self.status_code)


class RetryCancelled(Exception):
    """
    Raised when the cancel signal fires before or during a backoff wait.

    Attributes:
        operation_name: Name of the operation being retried
        attempts: Attempts made before cancellation
        last_error: Most recent failure (None if cancelled before any attempt)
    """

    def __init__(
        self,
        operation_name: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
    ) -> None:
        self.operation_name = operation_name
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Retry of {operation_name} cancelled after {attempts} attempt(s)"
        )
