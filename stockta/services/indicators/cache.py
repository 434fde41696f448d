"""
Indicator result cache.

In-memory, per-process memoization of indicator results. Keys are derived
from (series identity, indicator kind, validated parameters) and never from
the raw price arrays, so key size is bounded and a new data revision can
never hit a stale entry.

Thread safety: one mutex guards the entry map, and a per-key lock makes
concurrent requests for the same key compute at most once ("single-flight")
while other keys proceed.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from stockta.core.config import Settings, get_settings
from stockta.schemas.indicators import IndicatorKind
from stockta.schemas.market import SeriesIdentity
from stockta.services.base import InvalidParameterError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheKey:
    """Fingerprint of one indicator computation."""

    series: SeriesIdentity
    kind: IndicatorKind
    params: str  # canonical JSON of the validated parameter model

    def __str__(self) -> str:
        return f"{self.series}:{self.kind.value}:{self.params}"


@dataclass
class CacheEntry:
    result: Any
    computed_at: float  # clock() seconds
    ttl_ms: Optional[int] = None

    def is_expired(self, now: float) -> bool:
        return self.ttl_ms is not None and (now - self.computed_at) * 1000 >= self.ttl_ms


@dataclass
class _InFlight:
    """Per-key lock plus the number of threads holding or waiting on it."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0


def _check_optional_positive(value: Optional[int], name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer or None, got {value!r}")
    return value


class IndicatorCache:
    """
    Memoization cache owned by (or injected into) an IndicatorEngine.

    Usage:
        cache = IndicatorCache(max_size=500, default_ttl_ms=60_000)
        engine = IndicatorEngine(series, cache=cache)
    """

    def __init__(
        self,
        enabled: bool = True,
        max_size: Optional[int] = None,
        default_ttl_ms: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.enabled = enabled
        self.max_size = _check_optional_positive(max_size, "max_size")
        self.default_ttl_ms = _check_optional_positive(default_ttl_ms, "default_ttl_ms")
        self._clock = clock
        self._entries: "OrderedDict[CacheKey, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._inflight: dict[CacheKey, _InFlight] = {}
        self.stats = CacheStats()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "IndicatorCache":
        """Build a cache from the indicator_cache_* settings."""
        settings = settings or get_settings()
        return cls(
            enabled=settings.indicator_cache_enabled,
            max_size=settings.indicator_cache_max_size,
            default_ttl_ms=settings.indicator_cache_default_ttl_ms,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return self._lookup_locked(key) is not None

    # ============ Internal (caller holds self._lock) ============

    def _lookup_locked(self, key: CacheKey) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            self.stats.expirations += 1
            logger.debug(f"Indicator cache entry expired: {key}")
            return None
        return entry

    def _purge_expired_locked(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self.stats.expirations += len(expired)
        return len(expired)

    def _store_locked(self, key: CacheKey, result: Any, ttl_ms: Optional[int]) -> None:
        self._entries.pop(key, None)

        if self.max_size is not None and len(self._entries) >= self.max_size:
            self._purge_expired_locked()
            while len(self._entries) >= self.max_size:
                oldest, _ = self._entries.popitem(last=False)
                self.stats.evictions += 1
                logger.debug(f"Indicator cache full ({self.max_size}), evicted {oldest}")

        ttl = ttl_ms if ttl_ms is not None else self.default_ttl_ms
        self._entries[key] = CacheEntry(result=result, computed_at=self._clock(), ttl_ms=ttl)

    # ============ Public API ============

    def get(self, key: CacheKey) -> Optional[Any]:
        """Cached result for key, or None on a miss."""
        if not self.enabled:
            return None
        with self._lock:
            entry = self._lookup_locked(key)
            return entry.result if entry is not None else None

    def set(self, key: CacheKey, result: Any, ttl_ms: Optional[int] = None) -> None:
        """Store a result. No-op when the cache is disabled."""
        if not self.enabled:
            return
        _check_optional_positive(ttl_ms, "ttl_ms")
        with self._lock:
            self._store_locked(key, result, ttl_ms)

    def get_or_compute(
        self, key: CacheKey, compute: Callable[[], T], ttl_ms: Optional[int] = None
    ) -> T:
        """
        Return the cached result for key, computing and storing it on a miss.

        Exceptions from compute propagate unchanged and nothing is stored.
        When disabled, compute runs on every call.
        """
        if not self.enabled:
            with self._lock:
                self.stats.misses += 1
            return compute()

        _check_optional_positive(ttl_ms, "ttl_ms")
        with self._lock:
            entry = self._lookup_locked(key)
            if entry is not None:
                self.stats.hits += 1
                logger.debug(f"Indicator cache hit: {key}")
                return entry.result
            slot = self._inflight.get(key)
            if slot is None:
                slot = self._inflight[key] = _InFlight()
            slot.waiters += 1

        try:
            with slot.lock:
                # Another thread may have finished the same key while we waited
                with self._lock:
                    entry = self._lookup_locked(key)
                    if entry is not None:
                        self.stats.hits += 1
                        return entry.result
                    self.stats.misses += 1
                logger.debug(f"Indicator cache miss: {key}")

                result = compute()
                with self._lock:
                    self._store_locked(key, result, ttl_ms)
                return result
        finally:
            # Drop the slot only once no thread holds or waits on it
            with self._lock:
                slot.waiters -= 1
                if slot.waiters == 0:
                    del self._inflight[key]

    def invalidate(self, series: Optional[SeriesIdentity] = None) -> int:
        """
        Drop entries for one series identity, or everything when series is None.
        Returns the number of entries removed.
        """
        with self._lock:
            if series is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                stale = [key for key in self._entries if key.series == series]
                for key in stale:
                    del self._entries[key]
                removed = len(stale)

        if removed:
            logger.info(f"Invalidated {removed} indicator cache entries ({series or 'all series'})")
        return removed

    def purge_expired(self) -> int:
        """Remove all expired entries. Returns count removed."""
        with self._lock:
            return self._purge_expired_locked()

    def clear(self) -> None:
        """Drop all entries and reset statistics."""
        with self._lock:
            self._entries.clear()
            self.stats = CacheStats()
