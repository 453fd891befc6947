"""
Classification-core configuration: provider constants, prompt template, and
derived values.

Provider endpoints, rate limits and rotation weights are defined once in the
top-level ``config`` package and re-exported here so core modules import from
a single place.
"""

from config.api_config import (
    API_CONFIG,
    PROVIDER_LABELS,
    PROVIDER_ORDER,
    QUOTA_STATUS_CODES,
)
from config.model_params import (
    FIXED_TEMPERATURE_PREFIXES,
    MIN_DELAY_SECONDS,
    REQUEST_PARAMS,
    REQUEST_TIMEOUT_SECONDS,
    REQUESTS_PER_MINUTE,
    REVIEW_CONFIDENCE_THRESHOLD,
    ROTATION_WEIGHTS,
    delay_for_rpm,
)

from .taxonomy import format_taxonomy_for_prompt

__all__ = [
    "API_CONFIG",
    "PROVIDER_LABELS",
    "PROVIDER_ORDER",
    "QUOTA_STATUS_CODES",
    "FIXED_TEMPERATURE_PREFIXES",
    "MIN_DELAY_SECONDS",
    "REQUEST_PARAMS",
    "REQUEST_TIMEOUT_SECONDS",
    "REQUESTS_PER_MINUTE",
    "REVIEW_CONFIDENCE_THRESHOLD",
    "ROTATION_WEIGHTS",
    "delay_for_rpm",
    "CLASSIFICATION_PROMPT",
    "render_prompt",
]

# ---------------------------------------------------------------------------
# Classification prompt
# ---------------------------------------------------------------------------
# Input: name + description + website ONLY.  The model classifies; it must
# never supply factual fields, which come from the scraper.

CLASSIFICATION_PROMPT: str = """\
Analyze this organization for the UAE Startup Ecosystem.
Name: "{name}"
Description: "{description}"
Website: "{website}"

Task: Return ONLY valid JSON with these exact fields:
{{
  "isEcosystemOrg": true/false,
  "type": "startup" | "vc" | "incubator" | "government" | "community" | "other",
  "category": "NETWORKING & COMMUNITY" | "TALENT & EDUCATION" | "FUNDING & FINANCE" | "SUPPORT INFRASTRUCTURE" | "GROWTH & INNOVATION" | "POLICY & PUBLIC AGENCIES",
  "subcategory": "specific subcategory from allowed list",
  "role_summary": "One sentence describing their role in the ecosystem",
  "confidence": 0.0 to 1.0
}}

Allowed subcategories by category:
{taxonomy}

Rules:
- Use ONLY information from the provided description
- Do NOT infer or generate missing data
- Set confidence based on description quality
- If description is unclear, set confidence < 0.7
- Return ONLY the JSON object, no additional text\
"""


def render_prompt(name: str | None, description: str | None, website: str | None) -> str:
    """
    Fill the classification prompt for one organisation.

    Missing values are replaced with neutral placeholders rather than the
    string ``"None"``.
    """
    return CLASSIFICATION_PROMPT.format(
        name=name or "Unknown",
        description=description or "No description available",
        website=website or "Unknown",
        taxonomy=format_taxonomy_for_prompt(),
    )
