"""In-memory result cache with a time-to-live."""

import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

ALL_QUERIES_KEY = "__all__"
CACHE_TTL_SECONDS = 30 * 60


def cache_key(query: Optional[str]) -> str:
    return query or ALL_QUERIES_KEY


class TTLCache(Generic[T]):
    """Query → value map whose entries expire after `ttl` seconds.

    Owned by one engine instance; identical concurrent queries are not
    coalesced.
    """

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, T]] = {}

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
