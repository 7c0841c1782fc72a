"""
Pydantic data models for Research Loop.

Includes:
- Enums (TerminationReason, ErrorKind)
- Research models (Source, ResearchArtifact, ResearchStep, LoopSession)
- LLM models (LLMGenerationRequest, LLMGenerationResponse)
"""

from research_loop.models.enums import ErrorKind, TerminationReason
from research_loop.models.llm_models import (
    LLMGenerationRequest,
    LLMGenerationResponse,
)
from research_loop.models.research_models import (
    LoopSession,
    ResearchArtifact,
    ResearchStep,
    Source,
)

__all__ = [
    # Enums
    "ErrorKind",
    "TerminationReason",
    # Research models
    "Source",
    "ResearchArtifact",
    "ResearchStep",
    "LoopSession",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
]
