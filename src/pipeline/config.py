"""
Pipeline-layer configuration: path constants, record defaults, and the
publish-tier rules applied when merging a classification into a record.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Resolve from this file: src/pipeline/config.py → src/pipeline → src → root
PROJECT_ROOT = Path(__file__).resolve().parents[2]

DATA_DIR = PROJECT_ROOT / "data"
REPORTS_DIR = PROJECT_ROOT / "reports"
REVIEW_QUEUE_DIR = REPORTS_DIR

RECORDS_DB_PATH = DATA_DIR / "organisations.csv"

# ---------------------------------------------------------------------------
# Record defaults
# ---------------------------------------------------------------------------

DEFAULT_COUNTRY = "United Arab Emirates"
SOURCE_NAME = "enhanced_scraper"

# Descriptions this short carry no signal; classification is skipped
MIN_DESCRIPTION_LENGTH: int = 10

# ---------------------------------------------------------------------------
# Publish tiers (applied only to non-degraded ecosystem organisations)
# ---------------------------------------------------------------------------

# type → (publish tier, trust score)
TIER_RULES: dict[str, tuple[str, int]] = {
    "government": ("A", 90),
    "incubator":  ("A", 90),
    "startup":    ("B", 70),
    "vc":         ("B", 70),
}

DEFAULT_TIER = "C"
DEFAULT_TRUST_SCORE = 10
PUBLISH_TIERS: list[str] = ["A", "B", "C"]

# ---------------------------------------------------------------------------
# Record validation patterns
# ---------------------------------------------------------------------------

URL_PATTERN = r"^https?://.+\..+"
TWITTER_PATTERN = r"^@?[A-Za-z0-9_]{1,15}$"
