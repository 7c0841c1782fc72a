"""
HTTP research backend implementation.

Communicates with the research service using httpx AsyncClient:
- POST /api/research: {"subject"} -> {"summary", "sources"}
- POST /api/next-inquiry: {"summary"} -> {"nextSubject"}
- GET /api/health: {"status": "ok"}

Transport and protocol failures are translated into BackendError
subclasses; retrying them is left to the RetryEngine.
"""

import time
from typing import Any, Optional

import httpx
import structlog

from research_loop.backend.base_client import ResearchBackend
from research_loop.backend.exceptions import (
    BackendConnectionError,
    BackendPayloadError,
    BackendResponseError,
    BackendTimeoutError,
)
from research_loop.models.research_models import ResearchArtifact, Source

logger = structlog.get_logger(__name__)


class HttpResearchBackend(ResearchBackend):
    """
    Research backend reached over HTTP.

    Features:
    - Persistent AsyncClient (connection pooling)
    - Error bodies of the form {"error": "..."} are surfaced as messages
    - Accepts both flat {"uri", "title"} and legacy {"web": {...}} sources
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 180.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP backend.

        Args:
            base_url: Research service URL (e.g., http://localhost:4000)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "HTTP research backend initialized",
            base_url=self.base_url,
            timeout=timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def fetch_research(self, subject: str) -> ResearchArtifact:
        data = await self._post("/api/research", {"subject": subject})

        summary = data.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            raise BackendPayloadError(
                "Research service returned no summary",
                details={"subject": subject},
            )

        sources = self._parse_sources(data.get("sources"))
        logger.info(
            "Research received",
            subject=subject,
            summary_length=len(summary),
            sources_count=len(sources),
        )
        return ResearchArtifact(summary=summary, sources=tuple(sources))

    async def fetch_next_subject(self, summary: str) -> Optional[str]:
        data = await self._post("/api/next-inquiry", {"summary": summary})

        next_subject = data.get("nextSubject")
        if not isinstance(next_subject, str) or not next_subject.strip():
            logger.info("No next subject provided")
            return None

        next_subject = next_subject.strip()
        logger.info("Next subject received", next_subject=next_subject)
        return next_subject

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            response = await client.get("/api/health", timeout=5.0)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning("Research service health check failed", error=str(e))
            return False

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed research backend connection")

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST JSON and return the decoded object body, mapping failures."""
        client = await self._get_client()
        start_time = time.perf_counter()

        try:
            response = await client.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(
                f"Request to {path} timed out after {self.timeout}s",
                details={"path": path, "timeout": self.timeout},
            ) from e
        except httpx.TransportError as e:
            raise BackendConnectionError(
                f"Network error calling {path}: {e}",
                details={"path": path, "error_type": type(e).__name__},
            ) from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        data = self._decode(response)

        if response.is_error:
            error = data.get("error") if isinstance(data, dict) else None
            message = (
                error
                if isinstance(error, str) and error
                else f"The research service returned an error ({response.status_code})."
            )
            logger.debug(
                "Research service error response",
                path=path,
                status_code=response.status_code,
                latency_ms=latency_ms,
            )
            raise BackendResponseError(
                message,
                status_code=response.status_code,
                details={"path": path},
            )

        if not isinstance(data, dict):
            raise BackendPayloadError(
                f"Invalid JSON response from {path}",
                details={"path": path, "status": response.status_code},
            )

        logger.debug("Research service call succeeded", path=path, latency_ms=latency_ms)
        return data

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _parse_sources(raw_sources: Any) -> list[Source]:
        if not isinstance(raw_sources, list):
            return []

        sources: list[Source] = []
        for raw in raw_sources:
            if not isinstance(raw, dict):
                continue
            entry = raw.get("web") if isinstance(raw.get("web"), dict) else raw
            uri = entry.get("uri")
            title = entry.get("title")
            if isinstance(uri, str) and uri and isinstance(title, str) and title:
                sources.append(Source(uri=uri, title=title))
        return sources

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url}, timeout={self.timeout}s)"
