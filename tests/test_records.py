"""
Unit tests for src/pipeline/records.py.

Covers status derivation (tiers, degraded handling), record assembly,
pre-save validation rules, and the review queue file.
"""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from src.classifier.orchestrator import create_default_classification
from src.pipeline.records import (
    ReviewQueue,
    build_organisation_record,
    derive_status,
    validate_organisation,
)

from .conftest import make_result

ORG = {
    "name": "Acme Labs",
    "website": "https://acme.ae",
    "description": "Dubai-based accelerator for seed-stage startups.",
    "twitter": "@acmelabs",
}


def _record(classification=None, **org_overrides) -> dict:
    org = dict(ORG)
    org.update(org_overrides)
    return build_organisation_record(org, classification, synced_at=datetime(2025, 1, 2, 3, 4, 5))


# ---------------------------------------------------------------------------
# Class: derive_status
# ---------------------------------------------------------------------------

class TestDeriveStatus:

    def test_unclassified(self):
        status = derive_status(None)
        assert status["isActive"] is False
        assert status["publishTier"] == "C"
        assert status["trustScore"] == 10
        assert status["trustReasons"] == ["Manual/Scraper Entry"]
        assert status["needsReview"] is True

    @pytest.mark.parametrize("org_type, tier, trust", [
        ("government", "A", 90),
        ("incubator", "A", 90),
        ("startup", "B", 70),
        ("vc", "B", 70),
        ("community", "C", 10),
    ])
    def test_tiers_by_type(self, org_type, tier, trust):
        status = derive_status(make_result(org_type=org_type, needs_review=False))
        assert status["isActive"] is True
        assert status["publishTier"] == tier
        assert status["trustScore"] == trust
        assert status["trustReasons"] == [f"AI Classified as {org_type}"]

    def test_non_ecosystem_org_stays_inactive(self):
        status = derive_status(make_result(is_ecosystem_org=False, needs_review=False))
        assert status["isActive"] is False
        assert status["publishTier"] == "C"
        assert status["needsReview"] is False

    def test_degraded_never_activated(self):
        status = derive_status(create_default_classification())
        assert status["isActive"] is False
        assert status["publishTier"] == "C"
        assert status["needsReview"] is True
        assert status["confidence"] == 0.0


# ---------------------------------------------------------------------------
# Class: build_organisation_record
# ---------------------------------------------------------------------------

class TestBuildRecord:

    def test_facts_come_from_scraper(self):
        record = _record(make_result(role_summary="Runs an accelerator."))
        assert record["name"] == "Acme Labs"
        assert record["website"] == "https://acme.ae"
        assert record["twitter"] == "@acmelabs"
        assert record["country"] == "United Arab Emirates"
        assert record["roles"] == ["Runs an accelerator."]

    def test_provider_tracking(self):
        record = _record(make_result("moonshot", "kimi-k2-0905-preview"))
        assert record["source"]["aiProvider"] == "moonshot"
        assert record["source"]["aiModel"] == "kimi-k2-0905-preview"
        assert record["source"]["lastSyncedAt"] == "2025-01-02T03:04:05"

    def test_unclassified_gets_default_leaf(self):
        record = _record(None)
        assert record["categories"] == ["GROWTH & INNOVATION"]
        assert record["subcategories"] == ["General Entity"]
        assert record["source"]["aiProvider"] is None

    def test_empty_optional_fields_become_none(self):
        record = _record(None, twitter="", description="")
        assert record["twitter"] is None
        assert record["description"] is None

    def test_country_override(self):
        assert _record(None, country="Oman")["country"] == "Oman"


# ---------------------------------------------------------------------------
# Class: validate_organisation
# ---------------------------------------------------------------------------

class TestValidateOrganisation:

    def test_live_record_valid(self):
        assert validate_organisation(_record(make_result())) == (True, [])

    def test_degraded_record_valid(self):
        ok, errors = validate_organisation(_record(create_default_classification()))
        assert ok, errors

    def test_unclassified_record_valid(self):
        assert validate_organisation(_record(None))[0] is True

    def test_empty_record(self):
        assert validate_organisation(None) == (False, ["Organisation record is required"])

    def test_missing_name(self):
        ok, errors = validate_organisation(_record(None, name="  "))
        assert not ok
        assert "name is required and must be a non-empty string" in errors

    def test_missing_website(self):
        ok, errors = validate_organisation(_record(None, website=None))
        assert "website is required" in errors

    def test_bad_website(self):
        ok, errors = validate_organisation(_record(None, website="acme.ae"))
        assert any(e.startswith("website has invalid format") for e in errors)

    @pytest.mark.parametrize("handle", ["@acme_labs", "acme", "A1_b2"])
    def test_good_twitter(self, handle):
        assert validate_organisation(_record(None, twitter=handle))[0] is True

    @pytest.mark.parametrize("handle", ["@this_handle_is_too_long", "acme-labs", "@"])
    def test_bad_twitter(self, handle):
        ok, errors = validate_organisation(_record(None, twitter=handle))
        assert any(e.startswith("twitter has invalid format") for e in errors)

    def test_off_taxonomy_category(self):
        ok, errors = validate_organisation(_record(make_result(category="MADE UP")))
        assert not ok
        assert "categories contains invalid value: MADE UP" in errors

    def test_off_taxonomy_subcategory(self):
        ok, errors = validate_organisation(_record(make_result(subcategory="Space Lasers")))
        assert "subcategories contains invalid value: Space Lasers" in errors

    def test_empty_list(self):
        record = _record(make_result())
        record["roles"] = []
        assert "roles must contain at least one entry" in validate_organisation(record)[1]

    def test_non_list(self):
        record = _record(make_result())
        record["categories"] = "FUNDING & FINANCE"
        assert "categories must be a list" in validate_organisation(record)[1]

    def test_collects_every_error(self):
        record = _record(make_result(category="X"), name="", website="nope")
        _, errors = validate_organisation(record)
        assert len(errors) == 3


# ---------------------------------------------------------------------------
# Class: ReviewQueue
# ---------------------------------------------------------------------------

class TestReviewQueue:

    def test_empty_queue_writes_nothing(self, tmp_path):
        assert ReviewQueue().save(tmp_path) is None
        assert list(tmp_path.iterdir()) == []

    def test_save_writes_entries(self, tmp_path):
        queue = ReviewQueue()
        record = _record(None, website="bad")
        queue.add(record, ["website has invalid format"])
        path = queue.save(tmp_path / "queue")

        assert path.name.startswith("review_queue_")
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert len(saved) == 1
        assert saved[0]["organisation"]["name"] == "Acme Labs"
        assert saved[0]["errors"] == ["website has invalid format"]
        assert saved[0]["status"] == "pending_review"

    def test_clear(self):
        queue = ReviewQueue()
        queue.add({"name": "x"}, ["e"])
        queue.clear()
        assert len(queue) == 0
