"""
Per-attempt outcomes.

An AttemptOutcome is produced for every invocation inside the retry
engine and discarded once the engine decides to return, retry or raise.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The operation returned a value."""

    value: T


@dataclass(frozen=True)
class Failure:
    """The operation raised; is_retryable is the classifier's verdict."""

    error: Exception
    is_retryable: bool


AttemptOutcome = Union[Success[T], Failure]
