"""Custom Prometheus metrics for Research Loop.

These metrics are exposed at the research service's /metrics endpoint.
Alert rules worth configuring:
- research_retries_total (high retry rate indicates backend instability)
- loop_sessions_total{termination_reason="aborted"} (research failures)
"""

from prometheus_client import Counter, Histogram

# === Retry Metrics ===

retries_total = Counter(
    "research_retries_total",
    "Total backoff retries scheduled by operation",
    ["operation"],
)
"""
Retries counter by operation.

Labels:
- operation: research, next_inquiry, llm_research, llm_next_inquiry

Incremented once per scheduled backoff wait (not per attempt).
"""

# === Loop Metrics ===

research_steps_total = Counter(
    "research_steps_total",
    "Total research steps completed",
)

loop_sessions_total = Counter(
    "loop_sessions_total",
    "Total loop sessions by termination reason",
    ["termination_reason"],
)
"""
Loop sessions counter.

Labels:
- termination_reason: exhausted_requested_steps, next_inquiry_failed,
  no_next_subject, cancelled, aborted
"""

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM generation latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
)
"""
LLM generation latency histogram.

Buckets cover long research generations (up to 5 minutes).
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
