"""
Research backend abstraction and implementations.

Components:
- ResearchBackend: Abstract base with fetch_research / fetch_next_subject
- HttpResearchBackend: httpx client for the research service
- exceptions: Backend errors carrying retry classification
"""

from research_loop.backend.base_client import ResearchBackend
from research_loop.backend.exceptions import (
    BackendConnectionError,
    BackendError,
    BackendPayloadError,
    BackendResponseError,
    BackendTimeoutError,
)
from research_loop.backend.http_client import HttpResearchBackend

__all__ = [
    "ResearchBackend",
    "HttpResearchBackend",
    "BackendError",
    "BackendConnectionError",
    "BackendTimeoutError",
    "BackendResponseError",
    "BackendPayloadError",
]
