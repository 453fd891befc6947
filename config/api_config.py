"""
Provider endpoint and credential configuration for the classification core.

This is the AUTHORITATIVE source for backend configuration.
src/classifier/config.py imports from here; do not maintain parallel copies.

BEFORE RUNNING A SCRAPE:
1. Set the credential environment variables listed under key_env_var.
   Each holds a comma-separated list of keys; any number of keys is allowed
   and keys that hit their quota are dropped for the rest of the run.
2. Verify the free-tier model IDs are still served by each provider.

ENVIRONMENT VARIABLES:
    CEREBRAS_API_KEYS    — Cerebras inference API
    OPENROUTER_API_KEYS  — OpenRouter (free-tier models)
    MOONSHOT_API_KEYS    — Moonshot AI (Kimi)
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Provider configuration: one entry per classification backend
# ---------------------------------------------------------------------------
#
# Fields:
#   endpoint      : Full URL of the OpenAI-compatible chat completions API
#   models        : Model identifiers, tried in order within one request
#   key_env_var   : Environment variable holding the comma-separated keys
#   extra_headers : Static headers sent alongside the bearer token

API_CONFIG: dict[str, dict] = {
    "cerebras": {
        "endpoint": "https://api.cerebras.ai/v1/chat/completions",
        "models": ["gpt-oss-120b"],
        "key_env_var": "CEREBRAS_API_KEYS",
        "extra_headers": {},
    },
    "openrouter": {
        "endpoint": "https://openrouter.ai/api/v1/chat/completions",
        "models": [
            "arcee-ai/trinity-large-preview:free",
            "google/gemma-3-4b-it:free",
        ],
        "key_env_var": "OPENROUTER_API_KEYS",
        # OpenRouter attributes free-tier traffic to the calling app
        "extra_headers": {
            "HTTP-Referer": "https://github.com/uae-ecosystem-bot",
            "X-Title": "UAE Ecosystem Bot",
        },
    },
    "moonshot": {
        "endpoint": "https://api.moonshot.cn/v1/chat/completions",
        "models": ["kimi-k2-0905-preview", "moonshot-v1-32k"],
        "key_env_var": "MOONSHOT_API_KEYS",
        "extra_headers": {},
    },
}

# ---------------------------------------------------------------------------
# Provider ordering
# ---------------------------------------------------------------------------

# Fixed fallback order after the primary; also the rotation cycle order.
PROVIDER_ORDER: list[str] = ["cerebras", "openrouter", "moonshot"]

# Display names used in progress output
PROVIDER_LABELS: dict[str, str] = {
    "cerebras":   "Cerebras",
    "openrouter": "OpenRouter",
    "moonshot":   "Moonshot",
}

# HTTP status codes that mean the key itself is spent (rate limit / credits).
# 402 is what OpenRouter returns once a key's free credit is gone.
QUOTA_STATUS_CODES: frozenset[int] = frozenset({402, 429})
