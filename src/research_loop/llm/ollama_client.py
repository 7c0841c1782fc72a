"""
Ollama client implementation for LLM inference.

Communicates with Ollama API using httpx AsyncClient. Supports:
- Plain text generation
- Structured output via JSON Schema (format parameter)
- Connection pooling
- Health checks
"""

import json
import time
from typing import Any, Dict, Optional

import httpx
import structlog

from research_loop.llm.base_client import BaseLLMClient
from research_loop.llm.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMRequestError,
    LLMTimeoutError,
)
from research_loop.models.enums import ErrorKind
from research_loop.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from research_loop.monitoring.metrics import llm_latency_seconds, llm_tokens_total

logger = structlog.get_logger(__name__)


class OllamaClient(BaseLLMClient):
    """
    Ollama-specific LLM client using httpx for async HTTP communication.

    API Endpoints:
    - POST /api/generate: Generate completion with optional format constraint
    - GET /api/tags: List available models (used for health checks)

    Each generate() call makes exactly one HTTP request; failures are
    raised as LLMClientError subclasses for the RetryEngine to classify.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        timeout: int = 120,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            connection_limits: httpx connection pool limits (default: 10 max connections)
            transport: Optional httpx transport (tests use httpx.MockTransport)
            **kwargs: Additional config
        """
        super().__init__(base_url, timeout, **kwargs)

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )

        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
                follow_redirects=True
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    def _build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "prompt": request.prompt,
            "stream": request.stream,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            }
        }
        if request.seed is not None:
            payload["options"]["seed"] = request.seed
        if request.stop_sequences:
            payload["options"]["stop"] = request.stop_sequences
        if request.format_schema:
            # Ollama expects the schema object directly as "format"
            payload["format"] = request.format_schema
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion using Ollama API.

        POST /api/generate with payload:
        {
            "model": "qwen2.5:7b",
            "prompt": "...",
            "stream": false,
            "format": <JSON Schema, omitted for plain text>,
            "options": {"temperature": 0.3, "num_predict": 4096}
        }

        Response:
        {
            "model": "qwen2.5:7b",
            "created_at": "2026-02-19T...",
            "response": "...",
            "done": true,
            "eval_count": 150,
            "prompt_eval_count": 50
        }

        The content may be empty; callers decide whether that is an error.
        """
        start_time = time.time()
        payload = self._build_payload(request)

        logger.info(
            "Sending generation request to Ollama",
            model=request.model,
            prompt_length=len(request.prompt),
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            has_schema=bool(request.format_schema)
        )

        try:
            client = await self._get_client()
            response = await client.post("/api/generate", json=payload)
            response.raise_for_status()
            response_data = response.json()

        except httpx.TimeoutException as e:
            self._observe_failure(request.model, start_time)
            logger.warning("Ollama request timeout", timeout=self.timeout, error=str(e))
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"timeout": self.timeout}
            ) from e

        except httpx.HTTPStatusError as e:
            self._observe_failure(request.model, start_time)
            raise self._status_error(e, request.model) from e

        except httpx.TransportError as e:
            self._observe_failure(request.model, start_time)
            logger.warning("Ollama network error", error=str(e))
            raise LLMConnectionError(
                f"Network error: {str(e)}",
                details={"error_type": type(e).__name__}
            ) from e

        except json.JSONDecodeError as e:
            self._observe_failure(request.model, start_time)
            logger.error("Failed to parse Ollama response JSON", error=str(e))
            raise LLMGenerationError(
                "Invalid JSON response from Ollama",
                details={"parse_error": str(e)},
                kind=ErrorKind.INVALID_PAYLOAD,
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)
        content = response_data.get("response", "") or ""
        model_version = response_data.get("model", request.model)
        finish_reason = "stop" if response_data.get("done") else "incomplete"

        # Token counts (Ollama provides prompt_eval_count and eval_count)
        prompt_tokens = response_data.get("prompt_eval_count")
        completion_tokens = response_data.get("eval_count")
        total_tokens = None
        if prompt_tokens and completion_tokens:
            total_tokens = prompt_tokens + completion_tokens

        logger.info(
            "Ollama generation successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            finish_reason=finish_reason,
        )

        llm_latency_seconds.labels(
            model=model_version, success="true"
        ).observe(latency_ms / 1000.0)
        if prompt_tokens:
            llm_tokens_total.labels(
                model=model_version, token_type="prompt"
            ).inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(
                model=model_version, token_type="completion"
            ).inc(completion_tokens)

        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=finish_reason,
            usage_tokens=total_tokens,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            created_at=response_data.get("created_at"),
        )

    @staticmethod
    def _status_error(e: httpx.HTTPStatusError, model: str) -> Exception:
        status_code = e.response.status_code
        error_text = e.response.text

        logger.error("Ollama HTTP error", status_code=status_code, error_text=error_text)

        details = {"status": status_code, "error": error_text}
        if status_code == 404:
            return LLMModelNotAvailableError(
                f"Model not found: {model}",
                details={"model": model, "status": status_code},
                status_code=status_code,
            )
        if status_code == 429:
            return LLMRateLimitError(
                "Ollama rate limit exceeded", details=details, status_code=status_code
            )
        if status_code >= 500:
            return LLMGenerationError(
                f"Ollama server error: {status_code}", details=details, status_code=status_code
            )
        return LLMRequestError(
            f"Ollama client error: {status_code}",
            details=details,
            status_code=status_code,
            kind=ErrorKind.from_status(status_code),
        )

    @staticmethod
    def _observe_failure(model: str, start_time: float) -> None:
        llm_latency_seconds.labels(model=model, success="false").observe(time.time() - start_time)

    async def health_check(self) -> bool:
        """Check Ollama server health via GET /api/tags."""
        try:
            client = await self._get_client()
            response = await client.get("/api/tags", timeout=5.0)
            response.raise_for_status()
            logger.debug("Ollama health check passed")
            return True
        except httpx.HTTPError as e:
            logger.warning("Ollama health check failed", error=str(e))
            return False

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Ollama client connection")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
