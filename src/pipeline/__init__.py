"""
src/pipeline — host-side handling of classification results.

Module layout
-------------
config.py    — path constants, record defaults, publish-tier rules
records.py   — record assembly, pre-save validation, review queue
storage.py   — CSV organisation store with deduplicating upsert
report.py    — markdown run report
batch.py     — end-to-end batch run over scraped organisations

Public interface
----------------
Run a batch:
    process_organisations_batch(organisations, orchestrator)

Write the run report:
    generate_report(summary["records"], target_urls)
"""

from .batch import process_organisations_batch, should_classify
from .records import (
    ReviewQueue,
    build_organisation_record,
    validate_organisation,
)
from .report import generate_report
from .storage import load_records, upsert_organisation

__all__ = [
    # Batch run
    "process_organisations_batch",
    "should_classify",
    # Records
    "build_organisation_record",
    "validate_organisation",
    "ReviewQueue",
    # Storage
    "load_records",
    "upsert_organisation",
    # Reporting
    "generate_report",
]
