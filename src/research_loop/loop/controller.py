"""
Loop controller for chained research.

State machine over a single session:

    Ready -> RunningStep(1) -> AwaitingNextSubject(1) -> RunningStep(2) -> ...
          -> Completed | Aborted

- A research failure aborts the session (LoopAborted is raised).
- Reaching the requested step count completes it.
- A next-inquiry failure, or an empty next subject, completes it early;
  finished steps are always kept.
- A cancel signal completes it with termination_reason=cancelled.
"""

import asyncio
from typing import Optional

import structlog

from research_loop.backend.base_client import ResearchBackend
from research_loop.loop.exceptions import LoopAborted
from research_loop.models.enums import TerminationReason
from research_loop.models.research_models import (
    LoopSession,
    ResearchArtifact,
    ResearchStep,
)
from research_loop.monitoring.metrics import loop_sessions_total, research_steps_total
from research_loop.retry.engine import RetryEngine, RetryObserver
from research_loop.retry.exceptions import RetryCancelled
from research_loop.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)


class LoopObserver:
    """
    Receives progress notifications from the loop controller.

    All hooks are no-ops; subclasses override the ones they need
    (the CLI uses them to render steps as they complete).
    """

    def step_started(self, step_number: int, subject: str) -> None:
        pass

    def step_completed(self, step: ResearchStep) -> None:
        pass

    def next_subject_found(self, step_number: int, next_subject: str) -> None:
        pass


class LoopController:
    """
    Sequences research steps against a backend through the retry engine.

    The controller owns the in-flight session exclusively; nothing it
    holds is shared between run_loop() calls.

    Attributes:
        backend: Research backend (fetch_research / fetch_next_subject)
        engine: Retry engine wrapping every backend call
        on_retry: Optional retry observer forwarded to the engine
        observer: Progress observer
    """

    def __init__(
        self,
        backend: ResearchBackend,
        engine: Optional[RetryEngine] = None,
        on_retry: Optional[RetryObserver] = None,
        observer: Optional[LoopObserver] = None,
    ):
        self.backend = backend
        self.engine = engine or RetryEngine()
        self.on_retry = on_retry
        self.observer = observer or LoopObserver()

    async def run_loop(
        self,
        initial_subject: str,
        requested_step_count: int,
        policy: RetryPolicy,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> LoopSession:
        """
        Run up to `requested_step_count` research steps.

        The upper bound is left to the caller (the CLI enforces MAX_LOOPS).

        Args:
            initial_subject: Subject of step 1
            requested_step_count: Number of steps to attempt
            policy: Retry policy for both backend operations
            cancel_event: Optional signal ending the session early

        Returns:
            LoopSession, possibly shorter than requested

        Raises:
            ValueError: requested_step_count is less than 1
            LoopAborted: The research request of some step failed
        """
        if requested_step_count < 1:
            raise ValueError(
                f"requested_step_count must be at least 1, got {requested_step_count}"
            )

        log = logger.bind(
            initial_subject=initial_subject,
            requested_step_count=requested_step_count,
        )
        log.info("Research loop started")

        steps: list[ResearchStep] = []
        current_subject = initial_subject
        step_number = 1

        while True:
            if self._cancelled(cancel_event):
                return self._finish(steps, requested_step_count, TerminationReason.CANCELLED)

            # RunningStep(step_number)
            self.observer.step_started(step_number, current_subject)
            try:
                artifact: ResearchArtifact = await self.engine.execute(
                    lambda subject=current_subject: self.backend.fetch_research(subject),
                    policy,
                    self.on_retry,
                    cancel_event=cancel_event,
                    operation_name="research",
                )
            except RetryCancelled:
                return self._finish(steps, requested_step_count, TerminationReason.CANCELLED)
            except Exception as e:
                session = self._finish(steps, requested_step_count, TerminationReason.ABORTED)
                log.error(
                    "Research failed, aborting session",
                    step=step_number,
                    subject=current_subject,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise LoopAborted(step_number, current_subject, e, session) from e

            step = ResearchStep(
                sequence_number=step_number,
                subject=current_subject,
                artifact=artifact,
            )
            steps.append(step)
            research_steps_total.inc()
            self.observer.step_completed(step)
            log.info(
                "Research step completed",
                step=step_number,
                subject=current_subject,
                sources_count=len(artifact.sources),
            )

            if step_number >= requested_step_count:
                return self._finish(
                    steps, requested_step_count, TerminationReason.EXHAUSTED_REQUESTED_STEPS
                )

            if self._cancelled(cancel_event):
                return self._finish(steps, requested_step_count, TerminationReason.CANCELLED)

            # AwaitingNextSubject(step_number)
            try:
                next_subject = await self.engine.execute(
                    lambda summary=artifact.summary: self.backend.fetch_next_subject(summary),
                    policy,
                    self.on_retry,
                    cancel_event=cancel_event,
                    operation_name="next_inquiry",
                )
            except RetryCancelled:
                return self._finish(steps, requested_step_count, TerminationReason.CANCELLED)
            except Exception as e:
                log.warning(
                    "Next inquiry failed, ending loop early",
                    step=step_number,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return self._finish(
                    steps, requested_step_count, TerminationReason.NEXT_INQUIRY_FAILED
                )

            if next_subject is None or not next_subject.strip():
                log.info("No next subject provided, ending loop early", step=step_number)
                return self._finish(steps, requested_step_count, TerminationReason.NO_NEXT_SUBJECT)

            next_subject = next_subject.strip()
            steps[-1] = step.model_copy(update={"next_subject": next_subject})
            self.observer.next_subject_found(step_number, next_subject)

            current_subject = next_subject
            step_number += 1

    @staticmethod
    def _cancelled(cancel_event: Optional[asyncio.Event]) -> bool:
        return cancel_event is not None and cancel_event.is_set()

    @staticmethod
    def _finish(
        steps: list[ResearchStep],
        requested_step_count: int,
        reason: TerminationReason,
    ) -> LoopSession:
        session = LoopSession(
            requested_step_count=requested_step_count,
            steps=tuple(steps),
            termination_reason=reason,
        )
        loop_sessions_total.labels(termination_reason=reason.value).inc()
        logger.info(
            "Research loop finished",
            termination_reason=reason.value,
            steps_completed=len(steps),
            requested_step_count=requested_step_count,
        )
        return session


async def run_loop(
    backend: ResearchBackend,
    initial_subject: str,
    requested_step_count: int,
    policy: RetryPolicy,
    *,
    on_retry: Optional[RetryObserver] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> LoopSession:
    """Run a loop session with a fresh controller and default engine."""
    controller = LoopController(backend, on_retry=on_retry)
    return await controller.run_loop(
        initial_subject,
        requested_step_count,
        policy,
        cancel_event=cancel_event,
    )
