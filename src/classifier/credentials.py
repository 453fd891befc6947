"""
Per-provider API key pools with round-robin selection and dead-key eviction.

A pool is built once per run from a comma-separated environment value.  Keys
are only ever removed during a run (when the provider reports the key's quota
is spent); nothing is persisted between runs.
"""

from __future__ import annotations

import os
import threading
from typing import Mapping


def parse_key_list(raw: str | None) -> list[str]:
    """
    Split a comma-separated key list into clean, unique keys.

    Whitespace around each entry is stripped, empty entries are dropped, and
    duplicates keep their first position.

    Args:
        raw: Raw environment value, e.g. ``"k1, k2,,k1"``.

    Returns:
        Ordered list of unique keys (``['k1', 'k2']`` for the example).
    """
    if not raw:
        return []
    return _unique_keys(raw.split(","))


def _unique_keys(entries) -> list[str]:
    keys: list[str] = []
    for entry in entries:
        key = entry.strip()
        if key and key not in keys:
            keys.append(key)
    return keys


def mask_key(key: str) -> str:
    """Render a key for progress output without exposing it."""
    return f"...{key[-4:]}" if key else "<empty>"


class CredentialPool:
    """
    Ordered set of keys for one provider plus a round-robin cursor.

    Invariant: ``cursor < len(keys)`` after every mutation, or ``cursor == 0``
    when the pool is empty.
    """

    def __init__(self, provider: str, keys: list[str] | None = None):
        self.provider = provider
        self._keys: list[str] = _unique_keys(keys or [])
        self._cursor = 0
        self._lock = threading.Lock()

    @classmethod
    def load(cls, provider: str, source: str | None) -> "CredentialPool":
        """Build a pool from a comma-separated key list."""
        return cls(provider, parse_key_list(source))

    @classmethod
    def from_env(
        cls,
        provider: str,
        env_var: str,
        environ: Mapping[str, str] | None = None,
    ) -> "CredentialPool":
        """
        Build a pool from the named environment variable.

        Args:
            provider: Provider identifier the pool belongs to.
            env_var: Variable holding the comma-separated keys.
            environ: Mapping to read from (defaults to ``os.environ``).
        """
        environ = os.environ if environ is None else environ
        return cls.load(provider, environ.get(env_var))

    # ------------------------------------------------------------------

    def next(self) -> str | None:
        """
        Return the key at the cursor and advance the cursor.

        Returns:
            The next key in round-robin order, or ``None`` if the pool is
            empty.
        """
        with self._lock:
            if not self._keys:
                return None
            key = self._keys[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._keys)
            return key

    def evict(self, key: str) -> bool:
        """
        Remove ``key`` from the pool for the rest of the run.

        Evicting a key that is not (or no longer) in the pool is a no-op.

        Returns:
            ``True`` if the key was present and removed.
        """
        with self._lock:
            try:
                self._keys.remove(key)
            except ValueError:
                return False
            if self._cursor >= len(self._keys):
                self._cursor = 0
            return True

    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def keys(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def __repr__(self) -> str:
        return f"CredentialPool({self.provider!r}, size={len(self._keys)})"
