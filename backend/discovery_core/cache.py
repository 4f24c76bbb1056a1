"""In-process response cache with a fixed time-to-live per entry."""
import logging
import re
import time
from collections.abc import Callable
from typing import Any, Optional

from utils.config import CACHE_TTL_SECONDS

LOG = logging.getLogger(__name__)


class TTLCache:
    """
    Key/value map whose entries expire after ttl seconds.
    Expired entries are dropped when read; there is no background eviction.
    """

    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key; ttl overrides the default lifetime for this entry."""
        lifetime = self.ttl_seconds if ttl is None else ttl
        self._entries[key] = (value, self._clock() + lifetime)

    def _live_entry(self, key: str) -> Optional[tuple[Any, float]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry[1]:
            self._entries.pop(key, None)
            return None
        return entry

    def get(self, key: str) -> Any:
        """Return cached value or None when missing or expired."""
        entry = self._live_entry(key)
        return entry[0] if entry is not None else None

    def has(self, key: str) -> bool:
        """True if key is present and not expired."""
        return self._live_entry(key) is not None

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching the regex pattern (re.search). Returns number removed."""
        regex = re.compile(pattern)
        doomed = [k for k in list(self._entries) if regex.search(k)]
        for key in doomed:
            self._entries.pop(key, None)
        if doomed:
            LOG.debug("Cache invalidated %d key(s) matching %r", len(doomed), pattern)
        return len(doomed)

    def keys(self, pattern: Optional[str] = None) -> list[str]:
        """All stored keys, optionally filtered by regex. Expired keys may still be listed."""
        if pattern is None:
            return list(self._entries)
        regex = re.compile(pattern)
        return [k for k in self._entries if regex.search(k)]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


app_cache = TTLCache()


def location_key(location_id: str) -> str:
    return f"location:{location_id}"


def favorites_key(user_id: str) -> str:
    return f"favorites:{user_id}"


def routes_key(user_id: str) -> str:
    return f"routes:{user_id}"


def invalidate_location(location_id: str) -> None:
    """Drop cached payloads for one location."""
    app_cache.delete_pattern(f"^{re.escape(location_key(location_id))}(:|$)")
