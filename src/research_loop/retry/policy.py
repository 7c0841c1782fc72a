"""
Retry policy configuration.

A RetryPolicy is created once (at process start or per call site) and
shared read-only between callers; it is never mutated.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RetryPolicy(BaseModel):
    """
    Tunable parameters governing attempt count and backoff shape.

    Attributes:
        max_attempts: Total tries per execute() call, including the first
        initial_delay: Delay before the second attempt (seconds)
        max_delay: Upper bound for the pre-jitter delay (seconds)
        backoff_multiplier: Growth factor between consecutive delays
        jitter_fraction: Maximum relative perturbation applied to each delay
    """
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    initial_delay: float = Field(default=0.5, ge=0.0)
    max_delay: float = Field(default=5.0, ge=0.0)
    backoff_multiplier: float = Field(default=2.0, gt=1.0)
    jitter_fraction: float = Field(default=0.1, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> "RetryPolicy":
        if self.initial_delay > self.max_delay:
            raise ValueError(
                f"initial_delay ({self.initial_delay}) must be <= max_delay ({self.max_delay})"
            )
        return self


DEFAULT_RETRY_POLICY = RetryPolicy()
