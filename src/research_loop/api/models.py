"""
API-specific request and response models for the research service.

Field names follow the wire format shared with HttpResearchBackend
(camelCase nextSubject is kept for compatibility with existing clients).
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from research_loop.models.research_models import Source


def _str_or_none(value: Any) -> Optional[str]:
    # Non-string values count as missing so the route answers "... is required."
    return value if isinstance(value, str) else None


class ResearchRequest(BaseModel):
    """Body of POST /api/research."""

    subject: Optional[str] = Field(
        default=None,
        description="Subject to research",
        examples=["quantum computing"],
    )

    @field_validator("subject", mode="before")
    @classmethod
    def non_string_subject_is_missing(cls, value: Any) -> Optional[str]:
        return _str_or_none(value)


class ResearchResponse(BaseModel):
    """Response of POST /api/research."""

    summary: str = Field(description="Plain-text research summary")
    sources: list[Source] = Field(
        default_factory=list,
        description="Cited sources (uri + title)",
    )


class NextInquiryRequest(BaseModel):
    """Body of POST /api/next-inquiry."""

    summary: Optional[str] = Field(
        default=None,
        description="Summary of the previous research step",
    )

    @field_validator("summary", mode="before")
    @classmethod
    def non_string_summary_is_missing(cls, value: Any) -> Optional[str]:
        return _str_or_none(value)


class NextInquiryResponse(BaseModel):
    """Response of POST /api/next-inquiry; null means no continuation."""
    model_config = ConfigDict(populate_by_name=True)

    next_subject: Optional[str] = Field(
        default=None,
        alias="nextSubject",
        description="Suggested next subject, or null when none was found",
    )


class HealthResponse(BaseModel):
    """Response of GET /api/health."""

    status: str = Field(default="ok", examples=["ok"])


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str = Field(description="Human-readable error message")
