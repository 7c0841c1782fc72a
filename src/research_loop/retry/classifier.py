"""
Error classification for the retry engine.

classify() maps an ErrorDescriptor (kind + optional HTTP status) to
retryable / terminal. Unknown failure modes are terminal.
"""

from dataclasses import dataclass
from typing import Optional

from research_loop.models.enums import ErrorKind

RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.TRANSPORT,
        ErrorKind.TIMEOUT,
        ErrorKind.RATE_LIMITED,
        ErrorKind.SERVER_FAULT,
    }
)


@dataclass(frozen=True)
class ErrorDescriptor:
    """Structured description of a failure at the backend boundary."""

    kind: ErrorKind
    status_code: Optional[int] = None

    @classmethod
    def for_status(cls, status_code: int) -> "ErrorDescriptor":
        return cls(kind=ErrorKind.from_status(status_code), status_code=status_code)

    @classmethod
    def of(cls, error: BaseException) -> "ErrorDescriptor":
        """Descriptor carried by `error`, or UNKNOWN if it carries none."""
        descriptor = getattr(error, "descriptor", None)
        if isinstance(descriptor, ErrorDescriptor):
            return descriptor
        return cls(kind=ErrorKind.UNKNOWN)


def classify(descriptor: ErrorDescriptor) -> bool:
    """
    Decide whether a failure is worth retrying.

    Args:
        descriptor: Failure description

    Returns:
        True for transient failures (transport, timeout, rate limit,
        server fault), False for everything else.
    """
    return descriptor.kind in RETRYABLE_KINDS


def is_retryable(error: BaseException) -> bool:
    """Classify an error through the descriptor it carries."""
    return classify(ErrorDescriptor.of(error))
