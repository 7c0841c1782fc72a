"""Prometheus metrics for Research Loop."""

from research_loop.monitoring.metrics import (
    llm_latency_seconds,
    llm_tokens_total,
    loop_sessions_total,
    research_steps_total,
    retries_total,
)

__all__ = [
    "retries_total",
    "research_steps_total",
    "loop_sessions_total",
    "llm_latency_seconds",
    "llm_tokens_total",
]
