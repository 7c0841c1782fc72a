"""
LLM-specific data models for the request/response cycle.

These models are internal to the research service and handle the raw
communication with the inference server (Ollama). They are separate from
the research models (ResearchArtifact) so the service can reshape model
output before it reaches clients.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class LLMGenerationRequest(BaseModel):
    """
    Internal request model for LLM generation.

    Standardized format sent to any LLM client implementation.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Complete prompt (system + user combined)")
    model: str = Field(..., description="Model name/identifier (e.g., 'qwen2.5:7b')")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=4096, ge=1, le=32768, description="Maximum tokens to generate")
    format_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON Schema for structured output; None requests plain text"
    )
    stream: bool = Field(default=False, description="Whether to stream response (always False)")
    stop_sequences: Optional[list[str]] = Field(default=None, description="Stop sequences for generation")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducibility")


class LLMGenerationResponse(BaseModel):
    """
    Internal response model from LLM generation.

    Contains the raw generated text plus metadata for logging.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text (JSON string for structured requests)")
    model_version: str = Field(..., description="Actual model version used")
    finish_reason: str = Field(
        ...,
        description="Why generation stopped: 'stop', 'incomplete', etc."
    )
    usage_tokens: Optional[int] = Field(
        default=None,
        description="Total tokens used (prompt + completion)"
    )
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(..., ge=0, description="Generation latency in milliseconds")
    created_at: Optional[str] = Field(default=None, description="ISO timestamp from server")
