# =============================================================================
# hacknotify/service_worker/cache_storage.py
# Versioned response cache (cache generations) on the local database
# =============================================================================
"""
CacheStorage holds named cache generations. Each generation maps a request
URL to a full response snapshot. Invalidation is coarse: a whole
generation is dropped when the worker activates under a new version name.
Writes are last-write-wins.
"""

from __future__ import annotations
import json
from datetime import datetime
from typing import List, Optional
import logging

from hacknotify.offline.local_database import LocalDatabase, get_local_database
from hacknotify.service_worker.network import HttpResponse

logger = logging.getLogger(__name__)


class Cache:
    """One cache generation."""

    def __init__(self, storage: CacheStorage, name: str):
        self.storage = storage
        self.name = name

    @property
    def database(self) -> LocalDatabase:
        return self.storage.database

    def match(self, url: str) -> Optional[HttpResponse]:
        rows = self.database.query(
            """
            SELECT url, status, headers_json, body, stored_at
            FROM response_cache WHERE cache_name = ? AND url = ?
            """,
            [self.name, url],
        )
        return _row_to_response(rows[0]) if rows else None

    def put(self, url: str, response: HttpResponse) -> None:
        snapshot = response.stamped()
        self.database.execute(
            """
            INSERT OR REPLACE INTO response_cache
                (cache_name, url, status, headers_json, body, stored_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [self.name, url, snapshot.status, json.dumps(snapshot.headers),
             snapshot.body, snapshot.stored_at.isoformat()],
        )

    def put_all(self, entries: List[HttpResponse]) -> None:
        """Store several responses in one transaction (all or nothing)."""
        with self.database.transaction() as conn:
            for response in entries:
                snapshot = response.stamped()
                conn.execute(
                    """
                    INSERT OR REPLACE INTO response_cache
                        (cache_name, url, status, headers_json, body, stored_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [self.name, snapshot.url, snapshot.status, json.dumps(snapshot.headers),
                     snapshot.body, snapshot.stored_at.isoformat()],
                )

    def keys(self) -> List[str]:
        rows = self.database.query(
            "SELECT url FROM response_cache WHERE cache_name = ? ORDER BY url",
            [self.name],
        )
        return [row["url"] for row in rows]


def _row_to_response(row) -> HttpResponse:
    return HttpResponse(
        url=row["url"],
        status=row["status"],
        headers=json.loads(row["headers_json"] or "{}"),
        body=bytes(row["body"] or b""),
        stored_at=datetime.fromisoformat(row["stored_at"]),
    )


class CacheStorage:
    """
    All cache generations.

    Usage:
        storage = CacheStorage()
        cache = storage.open("hacktrackr-pwa-v1")
        cache.put(url, response)
        storage.match(url)
    """

    def __init__(self, database: Optional[LocalDatabase] = None):
        self._database = database

    @property
    def database(self) -> LocalDatabase:
        if self._database is None:
            self._database = get_local_database()
        return self._database

    def open(self, name: str) -> Cache:
        """Open (creating if needed) a cache generation."""
        self.database.execute(
            "INSERT OR IGNORE INTO cache_generations (cache_name, created_at) VALUES (?, ?)",
            [name, datetime.now().isoformat()],
        )
        return Cache(self, name)

    def has(self, name: str) -> bool:
        return name in self.keys()

    def keys(self) -> List[str]:
        rows = self.database.query("SELECT cache_name FROM cache_generations ORDER BY cache_name")
        return [row["cache_name"] for row in rows]

    def delete(self, name: str) -> bool:
        """Drop a whole generation. Returns whether it existed."""
        with self.database.transaction() as conn:
            conn.execute("DELETE FROM response_cache WHERE cache_name = ?", [name])
            cursor = conn.execute("DELETE FROM cache_generations WHERE cache_name = ?", [name])
            existed = cursor.rowcount > 0
        if existed:
            logger.info(f"Deleted cache generation {name}")
        return existed

    def match(self, url: str) -> Optional[HttpResponse]:
        """Look a URL up across every generation, oldest name first."""
        for name in self.keys():
            response = Cache(self, name).match(url)
            if response is not None:
                return response
        return None
