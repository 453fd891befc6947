"""
Shared pytest fixtures for the classification core and pipeline tests.

Network calls are never made: adapter tests patch ``requests.post`` in
src.classifier.providers, and orchestrator tests inject fake adapters.  The
rate limiter always runs on a fake clock so no test actually sleeps.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from src.classifier.credentials import CredentialPool
from src.classifier.models import ClassificationRequest, ClassificationResult
from src.classifier.rate_limit import RateLimiter

# ---------------------------------------------------------------------------
# Payload constants
# ---------------------------------------------------------------------------

VALID_PAYLOAD: dict = {
    "isEcosystemOrg": True,
    "type": "incubator",
    "category": "SUPPORT INFRASTRUCTURE",
    "subcategory": "Generalist Incubators & Accelerators",
    "role_summary": "Runs a Dubai-based accelerator programme for early-stage startups.",
    "confidence": 0.85,
}

ACME_DESCRIPTION = (
    "Acme Labs is a Dubai-based accelerator that runs two cohorts a year for "
    "seed-stage technology startups, offering mentorship, office space in "
    "Dubai Internet City, investor introductions and a demo day attended by "
    "regional venture capital firms. The programme focuses on fintech, "
    "logistics and climate technology companies from across the GCC and "
    "takes a small equity stake in exchange for a fixed cash grant and "
    "access to its network of corporate partners and government agencies."
)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeClock:
    """Manual clock; ``sleep`` advances time instead of blocking."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAdapter:
    """
    Stand-in backend adapter.

    ``outcomes`` is consumed one per call: a ClassificationResult, ``None``,
    or an Exception instance to raise.  Once exhausted, returns ``None``.
    """

    def __init__(self, name: str, outcomes=None):
        self.name = name
        self.outcomes = list(outcomes or [])
        self.calls: list[ClassificationRequest] = []

    def classify(self, request):
        self.calls.append(request)
        if not self.outcomes:
            return None
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_result(provider: str = "cerebras", model: str = "gpt-oss-120b", **overrides) -> ClassificationResult:
    """Live (non-degraded) adapter result with sensible defaults."""
    fields = {
        "is_ecosystem_org": True,
        "org_type": "incubator",
        "category": VALID_PAYLOAD["category"],
        "subcategory": VALID_PAYLOAD["subcategory"],
        "role_summary": VALID_PAYLOAD["role_summary"],
        "confidence": 0.85,
        "provider": provider,
        "model": model,
        "needs_review": True,
        "degraded": False,
    }
    fields.update(overrides)
    return ClassificationResult(**fields)


def make_http_response(content: str | None = None, status: int = 200, body=None) -> MagicMock:
    """Mocked ``requests.Response`` carrying a chat-completions body."""
    response = MagicMock()
    response.status_code = status
    response.reason = "OK" if status == 200 else "Error"
    if body is None:
        body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    response.json.return_value = body
    return response


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def limiter(fake_clock):
    """Rate limiter with the real per-provider delays on a fake clock."""
    return RateLimiter(clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def acme_request():
    return ClassificationRequest(
        name="Acme Labs",
        description=ACME_DESCRIPTION,
        website="https://acme.ae",
    )


@pytest.fixture
def valid_payload_text():
    return json.dumps(VALID_PAYLOAD)


@pytest.fixture
def result_factory():
    return make_result


@pytest.fixture
def http_response():
    return make_http_response


@pytest.fixture
def fake_adapter():
    return FakeAdapter


@pytest.fixture
def pool_factory():
    def _make(provider: str, *keys: str) -> CredentialPool:
        return CredentialPool(provider, list(keys))
    return _make
