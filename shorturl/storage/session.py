"""Session storage for authorised users."""

from __future__ import annotations

import threading


class SessionStorage:
    """Maps session keys to user identifiers."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self._lock = threading.RLock()

    def add(self, key: str, value: str) -> None:
        """Store a value under a key."""
        with self._lock:
            self.values[key] = value

    def get(self, key: str) -> str | None:
        """Return the value for a key, or ``None`` if absent."""
        with self._lock:
            return self.values.get(key)

    def get_all(self) -> dict[str, str]:
        """Return every stored entry."""
        with self._lock:
            return dict(self.values)