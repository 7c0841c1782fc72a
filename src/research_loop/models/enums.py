"""
Enumerations for Research Loop data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class TerminationReason(str, Enum):
    """
    Why a loop session stopped.

    EXHAUSTED_REQUESTED_STEPS, NEXT_INQUIRY_FAILED, NO_NEXT_SUBJECT and
    CANCELLED describe completed sessions (all finished steps are kept).
    ABORTED marks a session whose research request could not be satisfied.
    """

    EXHAUSTED_REQUESTED_STEPS = "exhausted_requested_steps"
    NEXT_INQUIRY_FAILED = "next_inquiry_failed"
    NO_NEXT_SUBJECT = "no_next_subject"
    CANCELLED = "cancelled"
    ABORTED = "aborted"


class ErrorKind(str, Enum):
    """
    Failure kinds reported at the backend boundary.

    The retry classifier decides on these values only, never on
    exception classes.
    """

    TRANSPORT = "transport"  # no response received
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_FAULT = "server_fault"
    CLIENT_REJECTED = "client_rejected"  # malformed or rejected request
    INVALID_PAYLOAD = "invalid_payload"  # empty or structurally invalid response
    UNKNOWN = "unknown"

    @classmethod
    def from_status(cls, status_code: int) -> "ErrorKind":
        """Map an HTTP status code to an error kind."""
        if status_code == 429:
            return cls.RATE_LIMITED
        if status_code == 408 or status_code >= 500:
            return cls.SERVER_FAULT
        if 400 <= status_code < 500:
            return cls.CLIENT_REJECTED
        return cls.UNKNOWN
