"""
LLM client abstraction and implementations (research service side).

Components:
- BaseLLMClient: Abstract base class for LLM clients
- OllamaClient: Implementation for Ollama inference server
- PromptBuilder: Renders research / next-inquiry prompts
- ResearchGenerator: ResearchBackend implemented with an LLM
- exceptions: LLM-specific exceptions
"""

from research_loop.llm.base_client import BaseLLMClient
from research_loop.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMRequestError,
    LLMSchemaViolationError,
    LLMTimeoutError,
)
from research_loop.llm.ollama_client import OllamaClient
from research_loop.llm.prompt_builder import PromptBuilder
from research_loop.llm.research_generator import ResearchGenerator

__all__ = [
    "BaseLLMClient",
    "OllamaClient",
    "PromptBuilder",
    "ResearchGenerator",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMModelNotAvailableError",
    "LLMRateLimitError",
    "LLMRequestError",
    "LLMSchemaViolationError",
    "LLMTimeoutError",
]
