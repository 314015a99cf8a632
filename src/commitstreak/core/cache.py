"""Short-lived in-memory response cache for commitstreak.

Entries are keyed by endpoint category plus parameters and expire after a
per-category TTL, so repeated checks inside one polling window reuse API
responses instead of spending rate limit. All methods are synchronous, which
keeps them atomic with respect to the event loop: interleaved coroutines can
share one cache without locking.
"""

from __future__ import annotations

import logging
import string
import time
from enum import StrEnum
from typing import Any, Callable

import msgspec

logger = logging.getLogger(__name__)


class CacheCategory(StrEnum):
    """Endpoint categories with their own default TTL."""

    USER_VALIDATION = "user-validation"
    USER_EVENTS = "user-events"
    REPOSITORIES = "repositories"
    COMMITS = "commits"
    SEARCH_COMMITS = "search-commits"


# Seconds
DEFAULT_TTL = 5 * 60
DEFAULT_MAX_ENTRIES = 100
CATEGORY_TTLS: dict[CacheCategory, float] = {
    CacheCategory.USER_VALIDATION: 10 * 60,
    CacheCategory.USER_EVENTS: 2 * 60,
    CacheCategory.REPOSITORIES: 5 * 60,
    CacheCategory.COMMITS: 1 * 60,
    CacheCategory.SEARCH_COMMITS: 30,
}

_BASE36_DIGITS = string.digits + string.ascii_lowercase


class CacheEntry(msgspec.Struct):
    """A cached value with its lifetime (epoch seconds)."""

    data: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheStats(msgspec.Struct, frozen=True):
    """Cache occupancy for observability."""

    total_entries: int
    active_entries: int
    expired_entries: int
    max_entries: int
    utilization_percent: int


def generate_key(category: str, *params: object) -> str:
    """Build a deterministic cache key from a category and parameters."""
    return ":".join([str(category), *(str(p) for p in params)])


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def hash_token(token: str) -> str:
    """Cheap, non-cryptographic hash of a token prefix.

    Only used to partition cache keys per token without putting the secret
    in the key. It is not a security boundary.
    """
    value = 0
    for char in token[:10]:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value & 0x80000000:
        value -= 1 << 32
    return _to_base36(abs(value))


class ResponseCache:
    """TTL cache with per-category defaults and a soft size bound.

    When the entry count reaches ``max_entries``, expired entries are swept
    before inserting. Live entries are never evicted, so the bound is
    best-effort.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        default_ttl: float = DEFAULT_TTL,
        ttls: dict[str, float] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self._ttls: dict[str, float] = {str(k): v for k, v in CATEGORY_TTLS.items()}
        if ttls:
            self._ttls.update(ttls)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def ttl_for(self, category: str) -> float:
        """TTL for a category, falling back to the default TTL."""
        return self._ttls.get(str(category), self.default_ttl)

    def get(self, key: str) -> Any | None:
        """Return cached data, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for key: %s", key)
            return None

        now = self._clock()
        if entry.is_expired(now):
            logger.debug("Cache expired for key: %s", key)
            del self._entries[key]
            return None

        logger.debug(
            "Cache hit for key: %s (age %.1fs)", key, now - entry.created_at
        )
        return entry.data

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        """Store data under key for ttl seconds (default TTL if None)."""
        if len(self._entries) >= self.max_entries:
            self.cleanup()

        now = self._clock()
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(data=data, created_at=now, expires_at=now + ttl)
        logger.debug(
            "Cached key %s for %.0fs (%d entries)", key, ttl, len(self._entries)
        )

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries."""
        size = len(self._entries)
        self._entries.clear()
        logger.info("Cleared cache (%d entries)", size)

    def cleanup(self) -> int:
        """Sweep expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]
        logger.debug(
            "Cache cleanup removed %d entries, %d remain",
            len(expired),
            len(self._entries),
        )
        return len(expired)

    def stats(self) -> CacheStats:
        """Total, active and expired counts plus utilization."""
        now = self._clock()
        total = len(self._entries)
        expired = sum(1 for e in self._entries.values() if e.is_expired(now))
        return CacheStats(
            total_entries=total,
            active_entries=total - expired,
            expired_entries=expired,
            max_entries=self.max_entries,
            utilization_percent=round(total / self.max_entries * 100)
            if self.max_entries
            else 0,
        )
