# =============================================================================
# hacknotify/offline/local_database.py
# Local SQLite Database for Offline Storage
# =============================================================================
"""
LocalDatabase - SQLite-backed storage shared by the offline layer.

Holds two key-value style tables:
- offline_cache:  last-known-good collections per (user, domain key)
- response_cache: HTTP response snapshots per (cache generation, url)

Features:
- Automatic schema creation
- Thread-local connections (UI thread, worker threads)
- Transaction support
"""

from __future__ import annotations
import sqlite3
import threading
from pathlib import Path
from typing import Any, List, Optional
from contextlib import contextmanager
import logging

from hacknotify.errors import CacheStoreError

logger = logging.getLogger(__name__)


class LocalDatabase:
    """
    Local SQLite database for offline data storage.
    """

    SCHEMA = {
        "offline_cache": """
            CREATE TABLE IF NOT EXISTS offline_cache (
                cache_key TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                domain_key TEXT NOT NULL,
                payload TEXT NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """,
        "response_cache": """
            CREATE TABLE IF NOT EXISTS response_cache (
                cache_name TEXT NOT NULL,
                url TEXT NOT NULL,
                status INTEGER NOT NULL,
                headers_json TEXT,
                body BLOB,
                stored_at TEXT NOT NULL,
                PRIMARY KEY (cache_name, url)
            )
        """,
        "cache_generations": """
            CREATE TABLE IF NOT EXISTS cache_generations (
                cache_name TEXT PRIMARY KEY,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """,
    }

    _instance: Optional[LocalDatabase] = None
    _lock = threading.Lock()

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize local database.

        Args:
            db_path: Path to SQLite database file
        """
        if db_path is None:
            from hacknotify.config import get_settings
            db_path = get_settings().db_path
        self.db_path = Path(db_path)
        self._ensure_directory()
        self._local = threading.local()
        self._initialized = False
        self._closed = False

    @classmethod
    def get_instance(cls, db_path: Optional[Path] = None) -> LocalDatabase:
        """Get or create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = LocalDatabase(db_path)
        return cls._instance

    def _ensure_directory(self) -> None:
        """Ensure database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if self._closed:
            raise CacheStoreError(f"Local database at {self.db_path} has been closed")

        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=10,
            )
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> None:
        """Initialize database schema."""
        if self._initialized:
            return

        with self.transaction() as conn:
            for table_name, schema in self.SCHEMA.items():
                conn.execute(schema)
                logger.debug(f"Created/verified table: {table_name}")

        self._initialized = True
        logger.info(f"Local database initialized at: {self.db_path}")

    def query(self, sql: str, params: Optional[List[Any]] = None) -> List[sqlite3.Row]:
        """Execute a read query."""
        conn = self._get_connection()
        cursor = conn.execute(sql, params or [])
        return cursor.fetchall()

    def execute(self, sql: str, params: Optional[List[Any]] = None) -> int:
        """Execute a write statement in its own transaction."""
        with self.transaction() as conn:
            cursor = conn.execute(sql, params or [])
            return cursor.rowcount

    def close(self) -> None:
        """
        Close the current thread's connection and refuse further use.

        Connections opened by other threads are released when those threads end.
        """
        connection = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            self._local.connection = None
        self._closed = True


# Singleton accessor
_local_database: Optional[LocalDatabase] = None


def get_local_database() -> LocalDatabase:
    """Get the global LocalDatabase instance."""
    global _local_database
    if _local_database is None:
        _local_database = LocalDatabase.get_instance()
        _local_database.initialize()
    return _local_database
