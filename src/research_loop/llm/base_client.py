"""
Abstract base client for LLM inference.

Defines the interface that LLM client implementations must adhere to.
This abstraction allows swapping inference backends without changing the
research generator or API layer.
"""

from abc import ABC, abstractmethod

import structlog

from research_loop.models.llm_models import LLMGenerationRequest, LLMGenerationResponse

logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    Responsibilities:
    - Send generation requests to inference server
    - Parse responses into standardized format
    - Translate connection and HTTP errors into LLMClientError subclasses

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Retries (that's RetryEngine's job)
    """

    def __init__(self, base_url: str, timeout: int = 120, **kwargs):
        """
        Initialize base client.

        Args:
            base_url: Base URL of LLM inference server (e.g., http://ollama:11434)
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.extra_config = kwargs

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion from the LLM.

        Args:
            request: Standardized generation request

        Returns:
            LLMGenerationResponse with generated text and metadata

        Raises:
            LLMConnectionError: Network errors
            LLMTimeoutError: Request exceeded timeout
            LLMGenerationError: Server-side generation errors
            LLMRequestError: Request rejected (incl. model not found)
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the inference server is reachable.

        Returns:
            True if server is healthy, False otherwise. Must not raise.
        """

    async def close(self):
        """Close client connections. Default implementation does nothing."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
