"""
Request parameters, rate limits, and rotation constants for the
classification backends.

This is the AUTHORITATIVE source for all parameter and scheduling constants.
src/classifier/config.py imports from here; do not maintain parallel copies.

Design notes:
- Per-call delays are derived from each provider's published free-tier
  requests-per-minute limit (delay = 60 / rpm).
- Rotation weights spread load roughly in proportion to those limits; the
  slow backend only takes a short turn each cycle.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Request parameters per provider
# ---------------------------------------------------------------------------

REQUEST_PARAMS: dict[str, dict[str, int | float]] = {
    "cerebras": {
        "temperature": 0.3,
        "max_tokens":  800,   # gpt-oss spends tokens on reasoning first
    },
    "openrouter": {
        "temperature": 0.3,
        "max_tokens":  500,
    },
    "moonshot": {
        "temperature": 0.3,
        "max_tokens":  500,
    },
}

# Model-name prefixes that reject any temperature other than 1
FIXED_TEMPERATURE_PREFIXES: dict[str, float] = {
    "kimi-": 1,
}

# HTTP request timeout for a single backend call
REQUEST_TIMEOUT_SECONDS: int = 60

# ---------------------------------------------------------------------------
# Rate limits (published free-tier requests per minute)
# ---------------------------------------------------------------------------

REQUESTS_PER_MINUTE: dict[str, int] = {
    "cerebras":   30,   # → 2 s between calls
    "openrouter": 20,   # → 3 s between calls
    "moonshot":   3,    # → 20 s between calls
}


def delay_for_rpm(rpm: int) -> float:
    """
    Convert a requests-per-minute limit into a minimum inter-call delay.

    Args:
        rpm: Published requests-per-minute limit (must be positive).

    Returns:
        Minimum seconds between consecutive calls.

    Raises:
        ValueError: If ``rpm`` is not positive.
    """
    if rpm <= 0:
        raise ValueError(f"requests-per-minute must be positive, got {rpm}")
    return round(60.0 / rpm, 3)


MIN_DELAY_SECONDS: dict[str, float] = {
    provider: delay_for_rpm(rpm) for provider, rpm in REQUESTS_PER_MINUTE.items()
}

# ---------------------------------------------------------------------------
# Rotation schedule
# ---------------------------------------------------------------------------

# Consecutive successful primary requests per provider before the cycle
# moves on: Cerebras (10) → OpenRouter (10) → Moonshot (2) → repeat.
ROTATION_WEIGHTS: dict[str, int] = {
    "cerebras":   10,
    "openrouter": 10,
    "moonshot":   2,
}

# ---------------------------------------------------------------------------
# Result thresholds
# ---------------------------------------------------------------------------

# Results below this confidence are flagged for manual review
REVIEW_CONFIDENCE_THRESHOLD: float = 0.7
