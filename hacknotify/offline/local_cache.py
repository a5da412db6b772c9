# =============================================================================
# hacknotify/offline/local_cache.py
# Last-known-good collection cache (per user, per domain key)
# =============================================================================
"""
LocalCacheStore - best-effort persistence of the last successful fetch.

Every entry is stored as JSON ``{"savedAt": <ISO-8601>, "value": <payload>}``
under ``hacktrackr.offline.v1.<user_id>.<domain_key>``. Entries never expire;
the recorded save time is shown to the user instead.

No operation raises. Each returns a CacheResult so callers have to look at
the outcome (HIT / MISS / ERROR, or STORED / ERROR for writes).
"""

from __future__ import annotations
import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Union
import logging

from hacknotify.errors import CacheStoreError
from hacknotify.offline.local_database import LocalDatabase, get_local_database

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "hacktrackr.offline.v1"


class DomainKey(str, Enum):
    """Collections that are cached for offline use."""
    TASKS = "tasks"
    HACKATHONS = "hackathons"


class CacheStatus(Enum):
    STORED = "stored"
    HIT = "hit"
    MISS = "miss"
    ERROR = "error"


@dataclass
class CacheEntry:
    """A cached collection and the moment it was saved."""
    saved_at: datetime
    value: Any

    def to_json(self) -> str:
        return json.dumps({"savedAt": self.saved_at.isoformat(), "value": self.value})

    @classmethod
    def from_json(cls, raw: str) -> CacheEntry:
        data = json.loads(raw)
        if not isinstance(data, dict) or "savedAt" not in data or "value" not in data:
            raise ValueError("cache payload is missing savedAt/value")
        saved_at = datetime.fromisoformat(str(data["savedAt"]).replace("Z", "+00:00"))
        return cls(saved_at=saved_at, value=data["value"])


@dataclass
class CacheResult:
    """
    Outcome of a cache operation.

    Truthy only for HIT and STORED.
    """
    status: CacheStatus
    entry: Optional[CacheEntry] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.status in (CacheStatus.HIT, CacheStatus.STORED)

    @property
    def is_hit(self) -> bool:
        return self.status == CacheStatus.HIT

    @property
    def value(self) -> Any:
        return self.entry.value if self.entry else None

    @property
    def saved_at(self) -> Optional[datetime]:
        return self.entry.saved_at if self.entry else None

    @classmethod
    def stored(cls, entry: CacheEntry) -> CacheResult:
        return cls(status=CacheStatus.STORED, entry=entry)

    @classmethod
    def hit(cls, entry: CacheEntry) -> CacheResult:
        return cls(status=CacheStatus.HIT, entry=entry)

    @classmethod
    def miss(cls) -> CacheResult:
        return cls(status=CacheStatus.MISS)

    @classmethod
    def failure(cls, error: str) -> CacheResult:
        return cls(status=CacheStatus.ERROR, error=error)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def cache_key(user_id: str, domain_key: Union[DomainKey, str]) -> str:
    """Build the namespaced storage key for a (user, domain) pair."""
    return f"{CACHE_KEY_PREFIX}.{user_id}.{DomainKey(domain_key).value}"


class LocalCacheStore:
    """
    Keyed, namespaced store of last-known-good server collections.

    Usage:
        store = LocalCacheStore()
        store.write(user_id, DomainKey.TASKS, tasks)
        result = store.read(user_id, DomainKey.TASKS)
        if result.is_hit:
            tasks, saved_at = result.value, result.saved_at
    """

    def __init__(
        self,
        database: Optional[LocalDatabase] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._database = database
        self._clock = clock

    @property
    def database(self) -> LocalDatabase:
        if self._database is None:
            self._database = get_local_database()
        return self._database

    def write(self, user_id: str, domain_key: Union[DomainKey, str], value: Any) -> CacheResult:
        """Replace the entry for (user_id, domain_key). Never raises."""
        try:
            key = cache_key(user_id, domain_key)
            entry = CacheEntry(saved_at=self._clock(), value=value)
            self.database.execute(
                """
                INSERT OR REPLACE INTO offline_cache
                    (cache_key, user_id, domain_key, payload, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                [key, user_id, DomainKey(domain_key).value, entry.to_json(),
                 entry.saved_at.isoformat()],
            )
            logger.debug(f"Cached {domain_key} for user {user_id}")
            return CacheResult.stored(entry)
        except (sqlite3.Error, CacheStoreError, TypeError, ValueError, OSError) as e:
            logger.warning(f"Offline cache write failed for {domain_key}: {e}")
            return CacheResult.failure(str(e))

    def read(self, user_id: str, domain_key: Union[DomainKey, str]) -> CacheResult:
        """Read the entry for (user_id, domain_key). Never raises."""
        try:
            rows = self.database.query(
                "SELECT payload FROM offline_cache WHERE cache_key = ?",
                [cache_key(user_id, domain_key)],
            )
            if not rows:
                return CacheResult.miss()
            return CacheResult.hit(CacheEntry.from_json(rows[0]["payload"]))
        except (sqlite3.Error, CacheStoreError, TypeError, ValueError, OSError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Offline cache read failed for {domain_key}: {e}")
            return CacheResult.failure(str(e))

    def clear(self, user_id: str) -> CacheResult:
        """Drop every cached collection of a user. Never raises."""
        try:
            self.database.execute("DELETE FROM offline_cache WHERE user_id = ?", [user_id])
            return CacheResult(status=CacheStatus.STORED)
        except (sqlite3.Error, CacheStoreError) as e:
            logger.warning(f"Offline cache clear failed for user {user_id}: {e}")
            return CacheResult.failure(str(e))


# Singleton accessor
_local_cache_store: Optional[LocalCacheStore] = None


def get_local_cache_store() -> LocalCacheStore:
    """Get the global LocalCacheStore instance."""
    global _local_cache_store
    if _local_cache_store is None:
        _local_cache_store = LocalCacheStore()
    return _local_cache_store
