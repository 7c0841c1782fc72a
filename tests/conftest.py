"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from research_loop.config import Settings
from research_loop.models.research_models import ResearchArtifact, Source
from research_loop.retry.policy import RetryPolicy


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.API_BASE_URL = "http://custom:4000"
    """
    return Settings(
        # === Application ===
        APP_NAME="Research Loop (Test)",
        APP_VERSION="0.1.0",
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="text",

        # === Backend ===
        API_BASE_URL=None,
        PORT=4000,
        REQUEST_TIMEOUT=5.0,

        # === Retry ===
        RETRY_MAX_ATTEMPTS=3,
        RETRY_INITIAL_DELAY=0.5,
        RETRY_MAX_DELAY=5.0,
        RETRY_BACKOFF_MULTIPLIER=2.0,
        RETRY_JITTER_FRACTION=0.1,

        # === Loop ===
        MAX_LOOPS=10,
        DEFAULT_LOOPS=1,

        # === Service ===
        OLLAMA_BASE_URL="http://localhost:11434",
        OLLAMA_MODEL="qwen2.5:7b",
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def no_jitter_policy() -> RetryPolicy:
    """Default backoff shape without jitter, for exact delay assertions."""
    return RetryPolicy(
        max_attempts=3,
        initial_delay=0.5,
        max_delay=5.0,
        backoff_multiplier=2.0,
        jitter_fraction=0.0,
    )


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Policy with millisecond delays for tests that really wait."""
    return RetryPolicy(
        max_attempts=3,
        initial_delay=0.001,
        max_delay=0.005,
        backoff_multiplier=2.0,
        jitter_fraction=0.0,
    )


@pytest.fixture
def sample_artifact() -> ResearchArtifact:
    """Research artifact with two sources."""
    return ResearchArtifact(
        summary="Quantum computing uses qubits to perform computation.",
        sources=(
            Source(uri="https://example.com/qubits", title="Qubits explained"),
            Source(uri="https://example.com/history", title="A short history"),
        ),
    )


@pytest.fixture
def make_artifact():
    """Factory for artifacts whose summary is derived from the subject."""

    def _make(subject: str, sources: int = 1) -> ResearchArtifact:
        return ResearchArtifact(
            summary=f"Summary of {subject}",
            sources=tuple(
                Source(uri=f"https://example.com/{i}", title=f"{subject} source {i}")
                for i in range(1, sources + 1)
            ),
        )

    return _make
