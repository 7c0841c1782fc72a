"""
Retry engine with exponential backoff and jitter.

Every outbound call to the research backend (and every LLM call made by
the research service) runs through RetryEngine.execute():

1. **Classify**: transient failures (transport, timeout, rate limit,
   server fault) are retried; everything else is terminal.
2. **Back off**: exponential delay capped at max_delay, with symmetric
   jitter from an injected random source.
3. **Surface**: the last attempt's own error is re-raised when attempts
   run out.

Main Components:
    - RetryEngine: Executes an operation under a RetryPolicy
    - RetryPolicy: Immutable attempt/backoff configuration
    - ErrorDescriptor / classify: Retryable vs terminal decision
    - delay_for: Backoff delay calculation
    - RetryCancelled: Raised when a cancel signal interrupts a wait
"""

from research_loop.retry.backoff import base_delay_for, delay_for
from research_loop.retry.classifier import ErrorDescriptor, classify, is_retryable
from research_loop.retry.engine import RetryEngine, RetryObserver
from research_loop.retry.exceptions import ClassifiableError, RetryCancelled
from research_loop.retry.outcome import AttemptOutcome, Failure, Success
from research_loop.retry.policy import DEFAULT_RETRY_POLICY, RetryPolicy

__all__ = [
    "RetryEngine",
    "RetryObserver",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "ErrorDescriptor",
    "classify",
    "is_retryable",
    "base_delay_for",
    "delay_for",
    "ClassifiableError",
    "RetryCancelled",
    "AttemptOutcome",
    "Success",
    "Failure",
]
