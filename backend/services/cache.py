"""Simple in-memory TTL cache for computed aggregates. No Redis needed.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
a voting history may be computed twice (once per worker). The cache still
eliminates repeated enrichment fan-out within the same worker.
"""

import time
from typing import Any, Callable


class TTLCache:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: dict[str, tuple[float, Any]] = {}
        self._clock = clock

    def get(self, key: str) -> Any | None:
        if key in self._store:
            expires_at, value = self._store[key]
            if self._clock() < expires_at:
                return value
            del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: int = 60) -> None:
        self._store[key] = (self._clock() + ttl_seconds, value)

    def __len__(self) -> int:
        return len(self._store)
