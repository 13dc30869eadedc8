"""In-memory read-through cache for identity and channel lookups."""

import threading
import time
from typing import Any, Dict, Optional, Tuple


class LookupCache:
    """Key-value store with optional expiration.

    Entries are content-addressed (the same key always yields the same or an
    equally valid value), so concurrent writers need no coordination beyond
    atomic single-entry writes: the last write wins.
    """

    def __init__(self, default_ttl: Optional[float] = None) -> None:
        # key -> (value, expiry timestamp or None)
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._default_ttl = default_ttl if default_ttl else None
        self._lock = threading.Lock()

    @staticmethod
    def key(
        namespace: str, platform: str, identifier: str, source: Optional[str] = None
    ) -> str:
        """Build a key; identifiers are only unique within their source platform."""
        if source:
            return f"{namespace}:{source}:{platform}:{identifier}"
        return f"{namespace}:{platform}:{identifier}"

    def get(self, key: str, default: Any = None) -> Any:
        now = time.monotonic()
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return default
            value, expiry = item
            if expiry is not None and expiry <= now:
                self._data.pop(key, None)
                return default
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, with an optional per-key TTL in seconds."""
        eff_ttl = ttl if ttl is not None else self._default_ttl
        expiry = time.monotonic() + eff_ttl if eff_ttl else None
        with self._lock:
            self._data[key] = (value, expiry)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


_MISSING = object()
