"""
Unit tests for API dependency injection.
"""

from research_loop.api.dependencies import (
    get_llm_client,
    get_prompt_builder,
    get_research_generator,
    get_retry_engine,
    get_retry_policy,
    get_settings,
)
from research_loop.config import Settings
from research_loop.llm.base_client import BaseLLMClient
from research_loop.llm.prompt_builder import PromptBuilder
from research_loop.llm.research_generator import ResearchGenerator
from research_loop.retry.engine import RetryEngine
from research_loop.retry.policy import RetryPolicy


def test_get_settings():
    """Test settings singleton."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2
    assert isinstance(settings1, Settings)


def test_get_llm_client():
    """Test LLM client singleton."""
    client1 = get_llm_client()
    client2 = get_llm_client()

    assert client1 is client2
    assert isinstance(client1, BaseLLMClient)
    assert client1.base_url == get_settings().OLLAMA_BASE_URL.rstrip("/")


def test_get_prompt_builder():
    """Test prompt builder singleton."""
    builder = get_prompt_builder()

    assert builder is get_prompt_builder()
    assert isinstance(builder, PromptBuilder)
    assert builder.default_model == get_settings().OLLAMA_MODEL


def test_get_research_generator():
    generator = get_research_generator()

    assert generator is get_research_generator()
    assert isinstance(generator, ResearchGenerator)
    assert generator.llm_client is get_llm_client()


def test_get_retry_engine():
    assert isinstance(get_retry_engine(), RetryEngine)
    assert get_retry_engine() is get_retry_engine()


def test_get_retry_policy_uses_server_settings():
    policy = get_retry_policy()

    assert isinstance(policy, RetryPolicy)
    assert policy == get_settings().server_retry_policy()
