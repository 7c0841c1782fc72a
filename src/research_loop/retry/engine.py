"""
Retry engine with exponential backoff.

Wraps a single async network operation: retries transient failures up to
policy.max_attempts tries, short-circuits terminal failures, and always
surfaces the most recent attempt's own error (never a synthetic one).

Usage:
    engine = RetryEngine(rng=random.Random(42))
    artifact = await engine.execute(
        lambda: backend.fetch_research(subject),
        policy,
        on_retry=log_retry,
        operation_name="research",
    )
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from research_loop.monitoring.metrics import retries_total
from research_loop.retry.backoff import delay_for
from research_loop.retry.classifier import ErrorDescriptor, classify
from research_loop.retry.exceptions import RetryCancelled
from research_loop.retry.outcome import AttemptOutcome, Failure, Success
from research_loop.retry.policy import RetryPolicy

T = TypeVar("T")

RetryObserver = Callable[[int, Exception, float], None]
"""Called as (attempt_number, error, delay_seconds) before each backoff wait."""

logger = structlog.get_logger(__name__)


class RetryEngine:
    """
    Stateless executor for retried operations.

    The engine holds no state across execute() calls beyond its injected
    collaborators, so one instance can serve any number of sessions.

    Attributes:
        rng: Random source for backoff jitter
        sleep: Coroutine used for backoff waits (asyncio.sleep)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize retry engine.

        Args:
            rng: Random source for jitter (a private random.Random if omitted)
            sleep: Wait coroutine, replaceable in tests
        """
        self.rng = rng if rng is not None else random.Random()
        self.sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: RetryPolicy,
        on_retry: Optional[RetryObserver] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        operation_name: str = "operation",
    ) -> T:
        """
        Execute `operation` under `policy`.

        Args:
            operation: Zero-argument coroutine factory, invoked once per attempt
            policy: Retry policy
            on_retry: Optional observer notified before each backoff wait
            cancel_event: When set, the in-flight attempt or pending backoff
                wait is abandoned and RetryCancelled is raised
            operation_name: Label used in logs and metrics

        Returns:
            The value returned by the first successful attempt

        Raises:
            Exception: The last attempt's error when attempts are exhausted,
                or the first terminal error
            RetryCancelled: The cancel signal fired
        """
        last_error: Optional[Exception] = None

        for attempt in range(policy.max_attempts):
            if cancel_event is not None and cancel_event.is_set():
                raise RetryCancelled(operation_name, attempt, last_error)

            outcome = await self._attempt(operation, cancel_event)
            if outcome is None:
                logger.info(
                    "Attempt cancelled in flight",
                    operation=operation_name,
                    attempt=attempt + 1,
                )
                raise RetryCancelled(operation_name, attempt + 1, last_error)

            if isinstance(outcome, Success):
                if attempt > 0:
                    logger.info(
                        "Retry succeeded",
                        operation=operation_name,
                        attempt=attempt + 1,
                    )
                return outcome.value

            last_error = outcome.error

            if attempt == policy.max_attempts - 1:
                logger.warning(
                    "Retry attempts exhausted",
                    operation=operation_name,
                    attempts=policy.max_attempts,
                    error_type=type(outcome.error).__name__,
                    error=str(outcome.error),
                )
                raise outcome.error

            if not outcome.is_retryable:
                logger.info(
                    "Terminal error, not retrying",
                    operation=operation_name,
                    attempt=attempt + 1,
                    error_type=type(outcome.error).__name__,
                    error=str(outcome.error),
                )
                raise outcome.error

            delay = delay_for(attempt, policy, self.rng)
            logger.warning(
                "Attempt failed, retrying",
                operation=operation_name,
                attempt=attempt + 1,
                max_attempts=policy.max_attempts,
                delay_seconds=round(delay, 3),
                error_type=type(outcome.error).__name__,
                error=str(outcome.error),
            )
            retries_total.labels(operation=operation_name).inc()
            if on_retry is not None:
                on_retry(attempt + 1, outcome.error, delay)

            cancelled = await self._wait(delay, cancel_event)
            if cancelled:
                logger.info(
                    "Backoff wait cancelled",
                    operation=operation_name,
                    attempt=attempt + 1,
                )
                raise RetryCancelled(operation_name, attempt + 1, last_error)

        # max_attempts >= 1 is enforced by RetryPolicy, so the loop always
        # returns or raises.
        raise AssertionError("unreachable")

    async def _attempt(
        self,
        operation: Callable[[], Awaitable[T]],
        cancel_event: Optional[asyncio.Event],
    ) -> Optional[AttemptOutcome]:
        """Run one attempt; None means the cancel signal fired first."""
        try:
            if cancel_event is None:
                return Success(await operation())
            task = await self._race(operation(), cancel_event)
            if task is None:
                return None
            return Success(task.result())
        except Exception as e:
            return Failure(error=e, is_retryable=classify(ErrorDescriptor.of(e)))

    async def _wait(self, delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
        """Wait `delay` seconds; return True if the cancel signal interrupted it."""
        if cancel_event is None:
            await self.sleep(delay)
            return False
        return await self._race(self.sleep(delay), cancel_event) is None

    @staticmethod
    async def _race(
        awaitable: Awaitable[T], cancel_event: asyncio.Event
    ) -> Optional["asyncio.Future[T]"]:
        """
        Await `awaitable` unless `cancel_event` fires first.

        Returns the finished future, or None after cancelling the
        unfinished awaitable. Cancellation wins a tie.
        """
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
        return None if waiter in done else task
