"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

import random
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from research_loop.backend.base_client import ResearchBackend
from research_loop.llm.base_client import BaseLLMClient
from research_loop.models.llm_models import LLMGenerationResponse
from research_loop.retry.engine import RetryEngine


@pytest.fixture
def mock_sleep() -> AsyncMock:
    """Replacement for asyncio.sleep that returns immediately."""
    return AsyncMock(return_value=None)


@pytest.fixture
def retry_engine(mock_sleep) -> RetryEngine:
    """RetryEngine with seeded jitter and no real waiting."""
    return RetryEngine(rng=random.Random(42), sleep=mock_sleep)


@pytest.fixture
def mock_backend() -> AsyncMock:
    """Mock ResearchBackend; configure fetch_* side effects per test."""
    return AsyncMock(spec=ResearchBackend)


@pytest.fixture
def mock_llm_client() -> AsyncMock:
    """Mock LLM client (async)."""
    return AsyncMock(spec=BaseLLMClient)


@pytest.fixture
def make_llm_response():
    """Factory for LLMGenerationResponse with the given content."""

    def _make(content: str) -> LLMGenerationResponse:
        return LLMGenerationResponse(
            content=content,
            model_version="qwen2.5:7b",
            finish_reason="stop",
            usage_tokens=750,
            prompt_tokens=500,
            completion_tokens=250,
            latency_ms=1500,
            created_at=datetime.now().isoformat(),
        )

    return _make
