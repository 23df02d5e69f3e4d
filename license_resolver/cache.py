"""In-memory license text cache shared by all resolution flows of one run."""

import threading
from collections.abc import Iterable
from typing import Optional


class LicenseCache:
    """Map of cache keys (package ids, URLs, paths) to normalized license text.

    Several keys may alias the same text. A key is written once: later
    writes for an existing key keep the stored value. Entries are never
    evicted; the cache lives as long as the LicenseService that owns it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: Optional[str]) -> Optional[str]:
        """Return the cached text for a key, or None on a miss."""
        if not key:
            return None
        with self._lock:
            return self._entries.get(key)

    def put(self, key: Optional[str], text: str) -> str:
        """Store text under a key unless the key is already present.

        Args:
            key: Cache key. Empty or None keys are ignored.
            text: Normalized license text.

        Returns:
            The text stored under the key after the call.
        """
        if not key:
            return text
        with self._lock:
            return self._entries.setdefault(key, text)

    def put_many(self, keys: Iterable[Optional[str]], text: str) -> None:
        """Store the same text under every given key."""
        with self._lock:
            for key in keys:
                if key:
                    self._entries.setdefault(key, text)

    def clear(self) -> None:
        """Drop every entry (end of run)."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
