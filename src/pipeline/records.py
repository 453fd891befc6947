"""
Organisation record assembly, pre-save validation, and the review queue.

A record combines scraper facts (name, website, country, twitter,
description) with classification output.  Facts always come from the
scraper; the classification only ever contributes category, subcategory,
role, review status, and provider tracking.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path

from src.classifier.models import ClassificationResult
from src.classifier.taxonomy import (
    DEFAULT_CATEGORY,
    DEFAULT_SUBCATEGORY,
    is_valid_category,
    is_valid_subcategory,
)

from .config import (
    DEFAULT_COUNTRY,
    DEFAULT_TIER,
    DEFAULT_TRUST_SCORE,
    REVIEW_QUEUE_DIR,
    SOURCE_NAME,
    TIER_RULES,
    TWITTER_PATTERN,
    URL_PATTERN,
)

_URL_RE = re.compile(URL_PATTERN)
_TWITTER_RE = re.compile(TWITTER_PATTERN)


# ---------------------------------------------------------------------------
# Record assembly
# ---------------------------------------------------------------------------

def derive_status(classification: ClassificationResult | None) -> dict:
    """
    Publication status implied by a classification.

    Unclassified and degraded organisations stay inactive in tier C and need
    review.  A live ecosystem classification activates the record; its type
    decides the tier (see ``TIER_RULES``).

    Args:
        classification: Result from the orchestrator, or ``None`` when
            classification was skipped.

    Returns:
        Dict with ``isActive``, ``publishTier``, ``trustScore``,
        ``trustReasons``, ``confidence``, ``needsReview``.
    """
    status = {
        "isActive": False,
        "publishTier": DEFAULT_TIER,
        "trustScore": DEFAULT_TRUST_SCORE,
        "trustReasons": ["Manual/Scraper Entry"],
        "confidence": None,
        "needsReview": True,
    }
    if classification is None:
        return status

    status["trustReasons"] = [f"AI Classified as {classification.org_type}"]
    status["confidence"] = classification.confidence
    if classification.degraded:
        return status

    status["needsReview"] = classification.needs_review
    if classification.is_ecosystem_org:
        status["isActive"] = True
        tier, trust = TIER_RULES.get(classification.org_type, (DEFAULT_TIER, DEFAULT_TRUST_SCORE))
        status["publishTier"] = tier
        status["trustScore"] = trust
    return status


def build_organisation_record(
    org: dict,
    classification: ClassificationResult | None,
    synced_at: datetime | None = None,
) -> dict:
    """
    Merge scraped facts and a classification into a storable record.

    Args:
        org: Scraped organisation dict (``name``, ``website``, optional
            ``country``, ``twitter``, ``description``).
        classification: Orchestrator result, or ``None`` if skipped.
        synced_at: Sync timestamp (defaults to now).

    Returns:
        Record dict with list-valued ``categories`` / ``subcategories`` /
        ``roles`` and nested ``source`` / ``status`` dicts.
    """
    if classification is not None:
        category = classification.category
        subcategory = classification.subcategory
        role = classification.role_summary
    else:
        category = DEFAULT_CATEGORY
        subcategory = DEFAULT_SUBCATEGORY
        role = "Organisation pending classification"

    return {
        "name": org.get("name"),
        "website": org.get("website"),
        "country": org.get("country") or DEFAULT_COUNTRY,
        "description": org.get("description") or None,
        "twitter": org.get("twitter") or None,
        "categories": [category],
        "subcategories": [subcategory],
        "roles": [role],
        "source": {
            "sourceName": SOURCE_NAME,
            "sourceUrl": org.get("website"),
            "lastSyncedAt": (synced_at or datetime.now()).isoformat(),
            "aiProvider": classification.provider if classification else None,
            "aiModel": classification.model if classification else None,
        },
        "status": derive_status(classification),
    }


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def is_valid_url(url) -> bool:
    return isinstance(url, str) and bool(_URL_RE.match(url))


def is_valid_twitter_handle(handle) -> bool:
    return isinstance(handle, str) and bool(_TWITTER_RE.match(handle))


def _is_nonempty_str(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_taxonomy_list(record: dict, field: str, is_valid, default: str) -> list[str]:
    values = record.get(field)
    if not isinstance(values, list):
        return [f"{field} must be a list"]
    if not values:
        return [f"{field} must contain at least one entry"]
    return [
        f"{field} contains invalid value: {value}"
        for value in values
        if not (is_valid(value) or value == default)
    ]


def validate_organisation(record: dict | None) -> tuple[bool, list[str]]:
    """
    Validate a record before it is saved.

    Rules:
    1. ``name`` and ``country`` are non-empty strings.
    2. ``website`` is present and matches ``https?://.+\\..+``.
    3. ``twitter`` is optional; if present it matches ``@?[A-Za-z0-9_]{1,15}``.
    4. ``categories`` / ``subcategories`` are non-empty lists of taxonomy
       members.  The default leaf used for unclassified records is accepted.
    5. ``roles`` is a non-empty list.

    Args:
        record: Record from :func:`build_organisation_record`.

    Returns:
        Tuple of ``(is_valid, errors)``; ``errors`` is empty when valid.
    """
    if not record:
        return False, ["Organisation record is required"]

    errors: list[str] = []

    if not _is_nonempty_str(record.get("name")):
        errors.append("name is required and must be a non-empty string")

    website = record.get("website")
    if not website:
        errors.append("website is required")
    elif not is_valid_url(website):
        errors.append("website has invalid format (must match pattern: https?://.+\\..+)")

    if not _is_nonempty_str(record.get("country")):
        errors.append("country is required")

    twitter = record.get("twitter")
    if twitter is not None and not is_valid_twitter_handle(twitter):
        errors.append("twitter has invalid format (must match pattern: @?[A-Za-z0-9_]{1,15})")

    errors += _check_taxonomy_list(record, "categories", is_valid_category, DEFAULT_CATEGORY)
    errors += _check_taxonomy_list(record, "subcategories", is_valid_subcategory, DEFAULT_SUBCATEGORY)

    roles = record.get("roles")
    if not isinstance(roles, list):
        errors.append("roles must be a list")
    elif not roles:
        errors.append("roles must contain at least one entry")

    return not errors, errors


# ---------------------------------------------------------------------------
# Review queue
# ---------------------------------------------------------------------------

class ReviewQueue:
    """Records that failed validation, held for manual review."""

    def __init__(self):
        self._items: list[dict] = []

    def add(self, record: dict, errors: list[str]) -> None:
        self._items.append({
            "organisation": record,
            "errors": list(errors),
            "timestamp": datetime.now().isoformat(),
            "status": "pending_review",
        })

    @property
    def items(self) -> list[dict]:
        return list(self._items)

    def clear(self) -> None:
        self._items = []

    def __len__(self) -> int:
        return len(self._items)

    def save(self, directory: Path = REVIEW_QUEUE_DIR) -> Path | None:
        """
        Write the queue to ``review_queue_<timestamp>.json``.

        Args:
            directory: Output directory (created if missing).

        Returns:
            Path of the written file, or ``None`` if the queue is empty.
        """
        if not self._items:
            print("Review queue is empty, no file created", flush=True)
            return None

        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        path = directory / f"review_queue_{stamp}.json"
        path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")
        print(f"Review queue saved: {path} ({len(self._items)} items)", flush=True)
        return path
