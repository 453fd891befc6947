"""
src/classifier — multi-provider classification core for ecosystem organisations.

Module layout
-------------
config.py        — provider constants (from config/), prompt template
taxonomy.py      — category → subcategory taxonomy, default leaf, org types
models.py        — ClassificationRequest / ClassificationResult
credentials.py   — per-provider key pools, round-robin, dead-key eviction
rate_limit.py    — per-provider minimum delay between calls
parser.py        — JSON extraction from free text, payload validation
providers.py     — one adapter per backend (Cerebras, OpenRouter, Moonshot)
rotation.py      — weighted primary-provider schedule
orchestrator.py  — fallback chain, review flags, graceful degradation

Public interface
----------------
Build from environment keys and classify:
    orchestrator = ClassificationOrchestrator.from_environment()
    result = orchestrator.classify({"name": ..., "description": ..., "website": ...})
    result.as_dict()

Fallback value when nothing is available:
    create_default_classification()
"""

from .credentials import CredentialPool
from .models import ClassificationRequest, ClassificationResult
from .orchestrator import ClassificationOrchestrator, create_default_classification
from .parser import parse_classification_response
from .rate_limit import RateLimiter
from .rotation import RotationScheduler
from .taxonomy import TAXONOMY

__all__ = [
    # Orchestration
    "ClassificationOrchestrator",
    "create_default_classification",
    # Types
    "ClassificationRequest",
    "ClassificationResult",
    # Building blocks
    "CredentialPool",
    "RateLimiter",
    "RotationScheduler",
    "parse_classification_response",
    "TAXONOMY",
]
