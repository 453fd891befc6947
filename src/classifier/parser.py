"""
Response text extraction and classification-payload validation.

No I/O occurs here; all functions are pure transformations of strings/dicts
to support easy unit testing.
"""

from __future__ import annotations

import json
import re

# ```json ... ``` or bare ``` ... ``` fences; contents captured lazily so the
# first fenced block wins when a response contains several.
_FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\r?\n?(.*?)```", re.DOTALL)

REQUIRED_STRING_FIELDS: tuple[str, ...] = ("category", "subcategory", "role_summary")


def extract_message_text(
    response_json: dict,
    provider: str,
    allow_reasoning: bool = False,
) -> str:
    """
    Extract the generated text from a chat-completions response.

    All three providers speak the OpenAI-compatible wire format:
    ``choices[0].message.content``.  Reasoning models served through
    OpenRouter may leave ``content`` empty and put the answer in
    ``choices[0].message.reasoning``; pass ``allow_reasoning=True`` to fall
    back to it.

    Args:
        response_json: Raw JSON-decoded response from the API.
        provider: Provider identifier (used in error messages only).
        allow_reasoning: Use ``message.reasoning`` when ``content`` is empty.

    Returns:
        Extracted text string (never empty).

    Raises:
        ValueError: If the response shape is unrecognized or carries no text.
    """
    if not isinstance(response_json, dict):
        raise ValueError(f"Unrecognized API response format from '{provider}'")

    choices = response_json.get("choices")
    if not choices or not isinstance(choices, list):
        raise ValueError(
            f"Unrecognized API response format from '{provider}'. "
            f"Top-level keys present: {list(response_json.keys())}"
        )

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise ValueError(f"Response from '{provider}' has no message object")

    content = message.get("content")
    if not content and allow_reasoning:
        content = message.get("reasoning")
    if not isinstance(content, str) or not content.strip():
        raise ValueError(f"No content in response from '{provider}'")
    return content


def _first_balanced_object(text: str) -> str | None:
    """
    Return the first balanced ``{...}`` span in ``text``, or ``None``.

    Braces inside JSON string literals are ignored so that values such as
    ``"role_summary": "Runs {weekly} meetups"`` do not end the span early.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for idx in range(start, len(text)):
            char = text[idx]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:idx + 1]
        # Unbalanced from this brace; try the next opening brace
        start = text.find("{", start + 1)
    return None


def extract_json_text(raw: str) -> str:
    """
    Isolate the JSON object inside free-form model output.

    Stages, in order:
      1. contents of the first fenced code block, if any;
      2. the first balanced ``{...}`` span;
      3. the stripped text as-is (left for the strict parse to reject).

    Args:
        raw: Text extracted from the API response.

    Returns:
        Candidate JSON text.
    """
    text = (raw or "").strip()

    fence = _FENCE_RE.search(text)
    if fence:
        text = fence.group(1).strip()

    span = _first_balanced_object(text)
    if span is not None:
        return span
    return text


def _is_number(value) -> bool:
    # bool is an int subclass but never a valid confidence
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clamp_confidence(value: float) -> float:
    """Clamp ``value`` into ``[0.0, 1.0]``."""
    return max(0.0, min(1.0, float(value)))


def validate_classification(payload) -> dict | None:
    """
    Check the required classification fields and normalise confidence.

    Rules:
    - ``isEcosystemOrg`` must be a boolean.
    - ``category``, ``subcategory``, ``role_summary`` must be non-empty strings.
    - ``confidence`` must be numeric; out-of-range values are clamped into
      ``[0, 1]`` rather than rejected.

    Taxonomy membership is NOT checked here.

    Args:
        payload: Decoded JSON value.

    Returns:
        A new dict with the normalised fields, or ``None`` if invalid.
    """
    if not isinstance(payload, dict):
        return None
    if not isinstance(payload.get("isEcosystemOrg"), bool):
        return None
    for field in REQUIRED_STRING_FIELDS:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            return None
    confidence = payload.get("confidence")
    if not _is_number(confidence) or confidence != confidence:  # NaN
        return None

    result = dict(payload)
    result["category"] = payload["category"].strip()
    result["subcategory"] = payload["subcategory"].strip()
    result["role_summary"] = payload["role_summary"].strip()
    result["confidence"] = clamp_confidence(confidence)
    return result


def parse_classification_response(raw: str) -> dict | None:
    """
    Parse free-form model output into a validated classification dict.

    Handles responses wrapped in prose and/or markdown fences::

        Sure! ```json
        {"isEcosystemOrg": true, ...}
        ```

    Args:
        raw: Text extracted from the API response.

    Returns:
        Validated dict (see :func:`validate_classification`) or ``None`` if
        no valid classification could be recovered.
    """
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        payload = json.loads(extract_json_text(raw))
    except (json.JSONDecodeError, ValueError):
        return None
    return validate_classification(payload)
