"""
Classification orchestration: primary selection, ordered fallback across
providers, review flagging, and graceful degradation.

Contract: :meth:`ClassificationOrchestrator.classify` always returns a
well-formed :class:`ClassificationResult` and never raises.  The only sign
of trouble is ``degraded=True`` / ``needs_review=True`` on the result.

Flow per request:
  1. no name → degraded default, no provider touched
  2. primary = scheduler.next_primary()
  3. try primary, then the other providers in fixed order, each once
  4. first result wins; only a primary win advances the rotation
  5. nothing → degraded default
"""

from __future__ import annotations

import os
from typing import Mapping, Sequence

from .config import (
    API_CONFIG,
    MIN_DELAY_SECONDS,
    PROVIDER_LABELS,
    PROVIDER_ORDER,
    REVIEW_CONFIDENCE_THRESHOLD,
)
from .credentials import CredentialPool
from .models import ClassificationRequest, ClassificationResult
from .providers import build_adapters
from .rate_limit import RateLimiter
from .rotation import RotationScheduler
from .taxonomy import DEFAULT_CATEGORY, DEFAULT_SUBCATEGORY, is_valid_pair

DEFAULT_ROLE_SUMMARY = "Organisation pending manual classification and review"


def create_default_classification() -> ClassificationResult:
    """
    Fixed fallback classification used when no provider could be used.

    Conservative on every field: not an ecosystem org, type ``'other'``,
    the taxonomy's default leaf, zero confidence, no provider/model, and
    flagged for review.  Same shape as a live result, so downstream code
    needs no separate path.
    """
    return ClassificationResult(
        is_ecosystem_org=False,
        org_type="other",
        category=DEFAULT_CATEGORY,
        subcategory=DEFAULT_SUBCATEGORY,
        role_summary=DEFAULT_ROLE_SUMMARY,
        confidence=0.0,
        provider=None,
        model=None,
        needs_review=True,
        degraded=True,
    )


class ClassificationOrchestrator:
    """
    Owns the provider adapters and the rotation schedule for one process.

    Adapters are any objects exposing ``classify(request) -> result | None``;
    tests inject fakes here.  All shared mutable state (key pools, rate-limit
    clocks, rotation counters) is lock-protected inside those collaborators,
    so one orchestrator may serve several threads.
    """

    def __init__(
        self,
        adapters: Mapping[str, object],
        scheduler: RotationScheduler | None = None,
        fallback_order: Sequence[str] = PROVIDER_ORDER,
        review_threshold: float = REVIEW_CONFIDENCE_THRESHOLD,
    ):
        self.adapters = dict(adapters)
        self.scheduler = scheduler or RotationScheduler()
        self.fallback_order: tuple[str, ...] = tuple(fallback_order)
        self.review_threshold = review_threshold

        missing = [
            p for p in (*self.fallback_order, *self.scheduler.order)
            if p not in self.adapters
        ]
        if missing:
            raise ValueError(f"No adapter configured for provider(s): {sorted(set(missing))}")

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> "ClassificationOrchestrator":
        """
        Build pools from the ``*_API_KEYS`` variables and wire everything up.

        Args:
            environ: Mapping to read keys from (defaults to ``os.environ``).
            rate_limiter: Limiter to share across adapters (default: real
                clock with the configured per-provider delays).

        Returns:
            Ready-to-use orchestrator with fresh pools and rotation state.
        """
        environ = os.environ if environ is None else environ
        pools = {
            name: CredentialPool.from_env(name, API_CONFIG[name]["key_env_var"], environ)
            for name in PROVIDER_ORDER
        }
        for name, pool in pools.items():
            print(f"Loaded {len(pool)} API keys for {name}", flush=True)

        limiter = rate_limiter or RateLimiter(MIN_DELAY_SECONDS)
        return cls(build_adapters(pools, limiter))

    # ------------------------------------------------------------------

    def attempt_order(self, primary: str) -> list[str]:
        """Primary first, then the remaining providers in fixed order."""
        return [primary] + [p for p in self.fallback_order if p != primary]

    def _finalize(self, result: ClassificationResult) -> ClassificationResult:
        needs_review = result.confidence < self.review_threshold
        if not is_valid_pair(result.category, result.subcategory):
            print(
                f"   Off-taxonomy classification '{result.category}' / "
                f"'{result.subcategory}', flagging for review",
                flush=True,
            )
            needs_review = True
        return result.with_review_flags(needs_review=needs_review, degraded=False)

    def classify(self, request: ClassificationRequest | dict | None) -> ClassificationResult:
        """
        Classify one organisation.

        Args:
            request: :class:`ClassificationRequest`, a scraped organisation
                dict, or ``None``.

        Returns:
            Live result from the first provider that succeeded, or the
            degraded default.  Never ``None``; never raises.
        """
        if not isinstance(request, ClassificationRequest):
            request = ClassificationRequest.from_mapping(
                request if isinstance(request, dict) else None
            )

        if not request.has_name:
            print("Invalid organisation data: name is required", flush=True)
            return create_default_classification()

        print(f"Classifying organisation: {request.name}", flush=True)
        primary = self.scheduler.next_primary()

        for provider in self.attempt_order(primary):
            is_primary = provider == primary
            label = PROVIDER_LABELS.get(provider, provider)
            role = "primary" if is_primary else "fallback"
            print(f"  Attempting classification with {label} ({role})...", flush=True)

            try:
                result = self.adapters[provider].classify(request)
            except Exception as exc:  # noqa: BLE001  (no provider failure is fatal)
                print(f"  Provider {label} raised: {str(exc)[:120]}", flush=True)
                result = None

            if not isinstance(result, ClassificationResult) or result.provider is None:
                print(f"  Provider {label} failed, trying next provider...", flush=True)
                continue

            if is_primary:
                self.scheduler.record_primary_success(primary)
                state = self.scheduler.state()
                print(
                    f"   Provider rotation: {state['current_provider']} "
                    f"({state['request_count']}/{state['limit']})",
                    flush=True,
                )

            final = self._finalize(result)
            print(
                f"  Classified with {label} (model: {final.model}, "
                f"confidence: {final.confidence})",
                flush=True,
            )
            return final

        print(f"All AI providers exhausted for organisation: {request.name}", flush=True)
        print(f"  Using default classification for {request.name} (flagged for review)", flush=True)
        return create_default_classification()
