"""
CSV-backed organisation store with deduplicating upsert.

Records are flattened to one row each: nested ``source`` / ``status`` dicts
become prefixed columns and list fields are JSON-encoded.  An incoming
record replaces the first stored row with the same website OR the same
name; otherwise it is appended.
"""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from .config import RECORDS_DB_PATH

LIST_FIELDS: list[str] = ["categories", "subcategories", "roles"]

RECORD_COLUMNS: list[str] = [
    "name",
    "website",
    "country",
    "description",
    "twitter",
    "categories",
    "subcategories",
    "roles",
    "source_sourceName",
    "source_sourceUrl",
    "source_lastSyncedAt",
    "source_aiProvider",
    "source_aiModel",
    "status_isActive",
    "status_publishTier",
    "status_trustScore",
    "status_trustReasons",
    "status_confidence",
    "status_needsReview",
]

# Read back as strings so handles and names such as "0071" survive a rewrite
TEXT_COLUMNS: list[str] = [
    c for c in RECORD_COLUMNS
    if c not in ("status_isActive", "status_trustScore", "status_confidence", "status_needsReview")
]


def flatten_record(record: dict) -> dict:
    """
    Flatten a nested organisation record into a single CSV row.

    Args:
        record: Record from ``records.build_organisation_record``.

    Returns:
        Dict keyed by ``RECORD_COLUMNS``.
    """
    row: dict = {}
    for column in RECORD_COLUMNS:
        if column.startswith(("source_", "status_")):
            group, key = column.split("_", 1)
            value = (record.get(group) or {}).get(key)
        else:
            value = record.get(column)
        if isinstance(value, list):
            value = json.dumps(value)
        row[column] = value
    return row


def load_records(db_path: Path = RECORDS_DB_PATH) -> pd.DataFrame:
    """
    Load the organisation store.

    Args:
        db_path: Path to the CSV store.

    Returns:
        DataFrame with ``RECORD_COLUMNS`` (empty if the file does not exist).
    """
    if not db_path.exists() or db_path.stat().st_size == 0:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    df = pd.read_csv(db_path, dtype={column: str for column in TEXT_COLUMNS})
    missing = [c for c in RECORD_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Organisation store {db_path} is missing columns: {missing}")
    return df[RECORD_COLUMNS]


def find_existing(df: pd.DataFrame, website: str | None, name: str | None) -> int | None:
    """
    Position of the first row matching ``website`` or ``name``.

    Empty values never match.
    """
    if df.empty:
        return None
    mask = pd.Series(False, index=df.index)
    if website:
        mask |= df["website"].fillna("").astype(str) == website
    if name:
        mask |= df["name"].fillna("").astype(str) == name
    positions = [i for i, hit in enumerate(mask.tolist()) if hit]
    return positions[0] if positions else None


def upsert_organisation(record: dict, db_path: Path = RECORDS_DB_PATH) -> str:
    """
    Insert a record or update the existing one with the same website/name.

    Args:
        record: Validated record dict.
        db_path: Path to the CSV store (created on first write).

    Returns:
        ``'updated'`` if an existing row was replaced, else ``'created'``.
    """
    df = load_records(db_path)
    row = flatten_record(record)
    position = find_existing(df, record.get("website"), record.get("name"))

    rows = df.to_dict("records")
    if position is None:
        rows.append(row)
        outcome = "created"
        print(f"  Creating: {record.get('name')}", flush=True)
    else:
        rows[position] = row
        outcome = "updated"
        print(f"  Updating: {record.get('name')}", flush=True)

    db_path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows, columns=RECORD_COLUMNS).to_csv(db_path, index=False)
    return outcome
