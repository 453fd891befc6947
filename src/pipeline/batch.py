"""
Batch classification run: classify, build, validate, and persist each
scraped organisation, then report run statistics.

Per organisation:
- classification is skipped when the description is too short to carry
  signal (the record is still saved, as unclassified);
- invalid records go to the review queue and are NOT saved;
- a failure on one organisation is reported and the run continues.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from src.classifier.config import PROVIDER_ORDER

from .config import MIN_DESCRIPTION_LENGTH, RECORDS_DB_PATH, REVIEW_QUEUE_DIR
from .records import ReviewQueue, build_organisation_record, validate_organisation
from .storage import upsert_organisation


def should_classify(org: dict) -> bool:
    """True if the organisation has a description long enough to classify."""
    description = org.get("description")
    return isinstance(description, str) and len(description) > MIN_DESCRIPTION_LENGTH


def _empty_ai_stats() -> dict:
    return {
        "total": 0,
        "successful": 0,
        "degraded": 0,
        "skipped": 0,
        "by_provider": {provider: 0 for provider in PROVIDER_ORDER},
    }


def process_organisations_batch(
    organisations: list[dict],
    orchestrator,
    db_path: Path = RECORDS_DB_PATH,
    review_queue: ReviewQueue | None = None,
    review_dir: Path = REVIEW_QUEUE_DIR,
) -> dict:
    """
    Process a batch of scraped organisations end to end.

    Args:
        organisations: Scraped dicts with ``name``, ``website`` and optional
            ``description``, ``twitter``, ``country``.
        orchestrator: Object exposing ``classify(request)`` (normally a
            :class:`~src.classifier.orchestrator.ClassificationOrchestrator`).
        db_path: CSV organisation store.
        review_queue: Queue for records failing validation (new if omitted).
        review_dir: Where the review queue is written if non-empty.

    Returns:
        Dict with ``ai_stats``, ``saved``, ``created``, ``updated``,
        ``validation_failures``, ``errors``, ``records`` (saved records),
        ``review_queue_path`` and ``session_duration_seconds``.
    """
    session_start = datetime.now()
    review_queue = review_queue if review_queue is not None else ReviewQueue()
    ai_stats = _empty_ai_stats()
    saved_records: list[dict] = []
    created = updated = validation_failures = errors = 0

    print(f"\nStarting batch: {len(organisations)} organisations\n", flush=True)

    for idx, org in enumerate(organisations, start=1):
        name = org.get("name")
        print(f"[{idx}/{len(organisations)}] {name}", flush=True)
        try:
            classification = None
            if should_classify(org):
                ai_stats["total"] += 1
                classification = orchestrator.classify(org)
                ai_stats["successful"] += 1
                if classification.degraded:
                    ai_stats["degraded"] += 1
                elif classification.provider in ai_stats["by_provider"]:
                    ai_stats["by_provider"][classification.provider] += 1
            else:
                print(f"  Skipping AI for {name} (description too short)", flush=True)
                ai_stats["skipped"] += 1

            record = build_organisation_record(org, classification)
            is_valid, problems = validate_organisation(record)
            if not is_valid:
                print(f"  Validation failed for {name}:", flush=True)
                for problem in problems:
                    print(f"   - {problem}", flush=True)
                review_queue.add(record, problems)
                validation_failures += 1
                continue

            if upsert_organisation(record, db_path) == "created":
                created += 1
            else:
                updated += 1
            saved_records.append(record)

        except Exception as exc:  # noqa: BLE001  (one bad record must not stop the run)
            print(f"  Could not save {name}: {exc}", flush=True)
            errors += 1

    review_queue_path = review_queue.save(review_dir) if len(review_queue) else None
    duration = (datetime.now() - session_start).total_seconds()

    summary = {
        "ai_stats": ai_stats,
        "saved": len(saved_records),
        "created": created,
        "updated": updated,
        "validation_failures": validation_failures,
        "errors": errors,
        "records": saved_records,
        "review_queue_path": review_queue_path,
        "session_duration_seconds": round(duration, 1),
    }
    print_batch_summary(summary, total=len(organisations))
    return summary


def print_batch_summary(summary: dict, total: int) -> None:
    stats = summary["ai_stats"]
    sep = "=" * 60
    print(f"\n{sep}", flush=True)
    print("AI CLASSIFICATION SUMMARY", flush=True)
    print(f"  Total organisations:  {total}", flush=True)
    print(f"  AI attempts:          {stats['total']}", flush=True)
    print(f"  AI successful:        {stats['successful']}", flush=True)
    print(f"  AI degraded:          {stats['degraded']}", flush=True)
    print(f"  AI skipped:           {stats['skipped']}", flush=True)
    print("  By provider:", flush=True)
    for provider, count in stats["by_provider"].items():
        print(f"    - {provider}: {count}", flush=True)
    print(sep, flush=True)
    print("VALIDATION SUMMARY", flush=True)
    print(f"  Validation failures:  {summary['validation_failures']}", flush=True)
    print(f"  Saved:                {summary['saved']} "
          f"({summary['created']} created, {summary['updated']} updated)", flush=True)
    print(f"  Errors:               {summary['errors']}", flush=True)
    print(f"{sep}\n", flush=True)
