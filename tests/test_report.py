"""
Unit tests for src/pipeline/report.py.
"""

from __future__ import annotations

from datetime import datetime

from src.pipeline.records import build_organisation_record
from src.pipeline.report import generate_report, render_report, tier_counts

from .conftest import make_result


def _record(name, website, classification=None) -> dict:
    org = {"name": name, "website": website, "description": "An organisation in the UAE."}
    return build_organisation_record(org, classification, synced_at=datetime(2025, 1, 1))


def _records() -> list[dict]:
    return [
        _record("Gov Agency", "https://gov.ae", make_result(org_type="government")),
        _record("Startup Co", "https://startup.ae", make_result(org_type="startup")),
        _record("Unknown Org", "https://unknown.ae", None),
    ]


# ---------------------------------------------------------------------------
# Class: tier_counts
# ---------------------------------------------------------------------------

class TestTierCounts:

    def test_one_per_tier(self):
        assert tier_counts(_records()) == {"A": 1, "B": 1, "C": 1}

    def test_empty(self):
        assert tier_counts([]) == {"A": 0, "B": 0, "C": 0}


# ---------------------------------------------------------------------------
# Class: render_report / generate_report
# ---------------------------------------------------------------------------

class TestReport:

    def test_render_sections(self):
        text = render_report(_records(), ["https://a.ae/list", "https://b.ae/list"])
        assert text.startswith("# Scrape Run Report")
        assert "| Total Processed | 3 |" in text
        assert "| Tier A (Gov/High Trust) | 1 |" in text
        assert "**Total Target URLs:** 2" in text
        assert "| 2 | https://b.ae/list |" in text
        assert "| Gov Agency | SUPPORT INFRASTRUCTURE | **A** | Active |" in text
        assert "| Unknown Org | GROWTH & INNOVATION | **C** | Pending |" in text

    def test_target_urls_optional(self):
        assert "## Target URLs" not in render_report(_records())

    def test_generate_writes_file(self, tmp_path):
        path = generate_report(_records(), reports_dir=tmp_path)
        assert path.name.startswith("Scrape_Report_")
        assert path.read_text(encoding="utf-8").startswith("# Scrape Run Report")
