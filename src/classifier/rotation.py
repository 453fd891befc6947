"""
Weighted provider rotation: which provider is primary for the next request.

The cycle is fixed: each provider is primary for ``weights[provider]``
successful primary requests, then the next provider in order takes over.
Failed attempts and fallback successes do not consume rotation budget.
"""

from __future__ import annotations

import threading
from typing import Mapping, Sequence

from .config import PROVIDER_ORDER, ROTATION_WEIGHTS


class RotationScheduler:
    """
    Process-wide rotation state: ``current`` provider and its request count.

    Invariant: ``request_count < weights[current]``.  Reaching the weight
    advances to the next provider and resets the count to zero.
    """

    def __init__(
        self,
        order: Sequence[str] = PROVIDER_ORDER,
        weights: Mapping[str, int] = ROTATION_WEIGHTS,
    ):
        if not order:
            raise ValueError("Rotation order must name at least one provider")
        if len(set(order)) != len(order):
            raise ValueError(f"Rotation order contains duplicates: {list(order)}")
        for provider in order:
            weight = weights.get(provider)
            if not isinstance(weight, int) or weight < 1:
                raise ValueError(
                    f"Rotation weight for '{provider}' must be a positive int, got {weight!r}"
                )
        self.order: tuple[str, ...] = tuple(order)
        self.weights: dict[str, int] = {p: weights[p] for p in self.order}
        self._index = 0
        self._count = 0
        self._lock = threading.Lock()

    @property
    def cycle_length(self) -> int:
        return sum(self.weights.values())

    def next_primary(self) -> str:
        """Provider that is primary for the next request (no state change)."""
        with self._lock:
            return self.order[self._index]

    def record_primary_success(self, provider: str | None = None) -> str:
        """
        Count one successful request served by the current primary.

        Args:
            provider: The primary the caller was given.  If another thread
                has already rotated away from it, the success is not counted
                against the new primary.

        Returns:
            The primary provider after the update (may have advanced).
        """
        with self._lock:
            if provider is not None and provider != self.order[self._index]:
                return self.order[self._index]
            self._count += 1
            if self._count >= self.weights[self.order[self._index]]:
                self._index = (self._index + 1) % len(self.order)
                self._count = 0
            return self.order[self._index]

    def state(self) -> dict:
        """Snapshot for progress output and tests."""
        with self._lock:
            current = self.order[self._index]
            return {
                "current_provider": current,
                "request_count": self._count,
                "limit": self.weights[current],
            }
