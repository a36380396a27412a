"""In-memory LRU cache with TTL expiration.

Process-level cache for research briefings. Survives across requests in
the same uvicorn worker and is checked before Redis.
TTL: 24h. Max 100 entries.
"""

import time
from collections import OrderedDict


class LRUCache:
    """TTL-aware LRU cache for JSON-serializable responses."""

    def __init__(self, max_size: int = 100, ttl_seconds: int = 86400) -> None:
        self._entries: OrderedDict[str, tuple[float, dict]] = OrderedDict()
        self._max_size = max_size
        self._ttl = ttl_seconds

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> dict | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if time.monotonic() - stored_at > self._ttl:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: dict) -> None:
        self._entries[key] = (time.monotonic(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)
