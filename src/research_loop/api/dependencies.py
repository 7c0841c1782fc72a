"""
FastAPI dependency injection for the research service.

Provides singleton instances of expensive resources (LLM client, prompt
builder) and the shared, stateless retry engine.
"""

from functools import lru_cache

from research_loop.config import Settings, settings
from research_loop.llm.base_client import BaseLLMClient
from research_loop.llm.ollama_client import OllamaClient
from research_loop.llm.prompt_builder import PromptBuilder
from research_loop.llm.research_generator import ResearchGenerator
from research_loop.retry.engine import RetryEngine
from research_loop.retry.policy import RetryPolicy


@lru_cache()
def get_settings() -> Settings:
    """Get settings singleton."""
    return settings


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton LLM client with connection pooling.

    Returns:
        OllamaClient instance
    """
    app_settings = get_settings()
    return OllamaClient(
        base_url=app_settings.OLLAMA_BASE_URL,
        timeout=app_settings.OLLAMA_TIMEOUT,
    )


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """
    Get singleton prompt builder.

    Loads Jinja2 templates and the research schema once.
    """
    app_settings = get_settings()
    return PromptBuilder(
        default_model=app_settings.OLLAMA_MODEL,
        default_temperature=app_settings.LLM_TEMPERATURE,
        default_max_tokens=app_settings.LLM_MAX_TOKENS,
    )


@lru_cache()
def get_research_generator() -> ResearchGenerator:
    """Get singleton LLM-backed research generator."""
    return ResearchGenerator(get_llm_client(), get_prompt_builder())


@lru_cache()
def get_retry_engine() -> RetryEngine:
    """
    Get the retry engine.

    Cached because RetryEngine keeps no per-call state; concurrent
    requests share it safely.
    """
    return RetryEngine()


def get_retry_policy() -> RetryPolicy:
    """Retry policy for LLM calls made by the service."""
    return get_settings().server_retry_policy()
