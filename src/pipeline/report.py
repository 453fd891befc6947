"""
Markdown run report: tier summary, target URLs, and per-record detail.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd

from .config import PUBLISH_TIERS, REPORTS_DIR
from .storage import flatten_record


def tier_counts(records: list[dict]) -> dict[str, int]:
    """Count records per publish tier; every tier appears, possibly with 0."""
    if not records:
        return {tier: 0 for tier in PUBLISH_TIERS}
    df = pd.DataFrame([flatten_record(r) for r in records])
    counts = df["status_publishTier"].value_counts()
    return {tier: int(counts.get(tier, 0)) for tier in PUBLISH_TIERS}


def render_report(records: list[dict], target_urls: list[str] | None = None) -> str:
    """
    Build the markdown report body.

    Args:
        records: Saved organisation records.
        target_urls: URLs that were scraped in this run (optional section).

    Returns:
        Markdown text.
    """
    tiers = tier_counts(records)
    lines = [
        "# Scrape Run Report",
        f"**Date:** {datetime.now():%Y-%m-%d %H:%M}",
        "",
        "## Executive Summary",
        "| Metric | Value |",
        "| :--- | :--- |",
        f"| Total Processed | {len(records)} |",
        f"| Tier A (Gov/High Trust) | {tiers['A']} |",
        f"| Tier B (Verified Startup) | {tiers['B']} |",
        f"| Tier C (Manual Review) | {tiers['C']} |",
        "",
    ]

    if target_urls:
        lines += [
            "## Target URLs",
            f"**Total Target URLs:** {len(target_urls)}",
            "",
            "| # | URL |",
            "| :--- | :--- |",
        ]
        lines += [f"| {i} | {url} |" for i, url in enumerate(target_urls, start=1)]
        lines.append("")

    lines += [
        "## Detailed Logs",
        "| Name | Category | Tier | Status |",
        "| :--- | :--- | :--- | :--- |",
    ]
    for record in records:
        status = record.get("status", {})
        category = (record.get("categories") or [""])[0]
        state = "Active" if status.get("isActive") else "Pending"
        lines.append(
            f"| {record.get('name')} | {category} | **{status.get('publishTier')}** | {state} |"
        )

    return "\n".join(lines) + "\n"


def generate_report(
    records: list[dict],
    target_urls: list[str] | None = None,
    reports_dir: Path = REPORTS_DIR,
) -> Path:
    """
    Write the markdown report to ``Scrape_Report_<timestamp>.md``.

    Returns:
        Path of the written report.
    """
    reports_dir.mkdir(parents=True, exist_ok=True)
    path = reports_dir / f"Scrape_Report_{datetime.now():%Y-%m-%dT%H-%M-%S}.md"
    path.write_text(render_report(records, target_urls), encoding="utf-8")
    print(f"\nMarkdown report generated: {path}", flush=True)
    return path
