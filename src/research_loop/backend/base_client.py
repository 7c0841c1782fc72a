"""
Abstract research backend.

Defines the two operations the loop controller consumes. Implementations
raise BackendError subclasses (or any ClassifiableError) on failure so the
retry engine can classify them.
"""

from abc import ABC, abstractmethod
from typing import Optional

from research_loop.models.research_models import ResearchArtifact


class ResearchBackend(ABC):
    """
    Abstract base class for research backends.

    Responsibilities:
    - Produce a ResearchArtifact for a subject
    - Propose the next subject from a research summary

    Does NOT handle retries (that's RetryEngine's job) or step sequencing
    (that's LoopController's job).
    """

    @abstractmethod
    async def fetch_research(self, subject: str) -> ResearchArtifact:
        """
        Research a subject.

        Args:
            subject: Topic to investigate

        Returns:
            ResearchArtifact with summary and sources

        Raises:
            BackendError: Transport, protocol or payload failure
        """

    @abstractmethod
    async def fetch_next_subject(self, summary: str) -> Optional[str]:
        """
        Propose the next subject from a research summary.

        Returns:
            The next subject, or None when the backend has no continuation
            (a valid outcome, not an error)

        Raises:
            BackendError: Transport, protocol or payload failure
        """

    async def health_check(self) -> bool:
        """Default: assume healthy. Must not raise."""
        return True

    async def close(self) -> None:
        """Release connections. Default implementation does nothing."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
