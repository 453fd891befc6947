"""
Per-provider minimum-delay enforcement between outbound calls.

Each provider has its own clock and lock, so a slow provider never delays
calls to a fast one.  The clock and sleep functions are injectable so tests
can run without real waiting.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Mapping

from .config import MIN_DELAY_SECONDS, PROVIDER_LABELS


class RateLimiter:
    """
    Enforces ``min_delays[provider]`` seconds between consecutive calls.

    Call :meth:`await_turn` immediately before every outbound request to a
    provider, exactly once per request.
    """

    def __init__(
        self,
        min_delays: Mapping[str, float] = MIN_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        for provider, delay in min_delays.items():
            if delay < 0:
                raise ValueError(f"Negative delay for provider '{provider}': {delay}")
        self.min_delays = dict(min_delays)
        self._clock = clock
        self._sleep = sleep
        # None = never called, so the first request never waits
        self._last_call: dict[str, float | None] = {p: None for p in self.min_delays}
        self._locks: dict[str, threading.Lock] = {p: threading.Lock() for p in self.min_delays}

    def await_turn(self, provider: str) -> float:
        """
        Block until ``provider``'s minimum delay has elapsed, then stamp now.

        The new timestamp is recorded whether or not the caller waited.

        Args:
            provider: Provider identifier (must be configured).

        Returns:
            Seconds actually waited (0.0 if no wait was needed).

        Raises:
            KeyError: If ``provider`` has no configured delay.
        """
        required = self.min_delays[provider]
        with self._locks[provider]:
            waited = 0.0
            last = self._last_call[provider]
            if last is not None:
                elapsed = self._clock() - last
                if elapsed < required:
                    waited = required - elapsed
                    label = PROVIDER_LABELS.get(provider, provider)
                    print(f"   Rate limit: waiting {waited:.1f}s before {label} request...", flush=True)
                    self._sleep(waited)
            now = self._clock()
            if last is None or now > last:
                self._last_call[provider] = now
            return waited

    def last_call(self, provider: str) -> float | None:
        return self._last_call[provider]
