"""
Backoff delay calculation.

Exponential growth capped at max_delay, with symmetric jitter drawn from
an injected random source so retry timing is reproducible in tests.
"""

import random

from research_loop.retry.policy import RetryPolicy


def base_delay_for(attempt_index: int, policy: RetryPolicy) -> float:
    """
    Pre-jitter delay for a 0-based attempt index, in seconds.

    Non-decreasing in attempt_index and never above policy.max_delay.
    """
    if attempt_index < 0:
        raise ValueError("attempt_index must be >= 0")
    try:
        exponential = policy.initial_delay * policy.backoff_multiplier ** attempt_index
    except OverflowError:
        return policy.max_delay
    return min(exponential, policy.max_delay)


def delay_for(attempt_index: int, policy: RetryPolicy, rng: random.Random) -> float:
    """
    Delay to wait after a failed attempt, in seconds.

    Args:
        attempt_index: 0-based index of the attempt that just failed
        policy: Retry policy
        rng: Random source; U is drawn uniformly from [-1, 1]

    Returns:
        base + base * jitter_fraction * U, floored at zero
    """
    base = base_delay_for(attempt_index, policy)
    jitter = base * policy.jitter_fraction * rng.uniform(-1.0, 1.0)
    return max(0.0, base + jitter)
