# =============================================================================
# tests/unit/test_local_cache.py
# Unit Tests for LocalCacheStore
# =============================================================================

import json
from datetime import datetime, timezone

import pytest


class TestCacheKey:
    """Test key namespacing"""

    def test_key_format(self):
        from hacknotify.offline.local_cache import DomainKey, cache_key

        assert cache_key("u1", DomainKey.TASKS) == "hacktrackr.offline.v1.u1.tasks"
        assert cache_key("u1", "hackathons") == "hacktrackr.offline.v1.u1.hackathons"

    def test_unknown_domain_rejected(self):
        from hacknotify.offline.local_cache import cache_key

        with pytest.raises(ValueError):
            cache_key("u1", "teams")


class TestCacheReadWrite:
    """Test write/read behaviour"""

    def test_read_after_write_returns_value_and_save_time(self, local_db):
        from hacknotify.offline.local_cache import DomainKey, LocalCacheStore

        saved_at = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        store = LocalCacheStore(database=local_db, clock=lambda: saved_at)
        tasks = [{"id": "t-1", "title": "Pitch"}]

        assert store.write("u1", DomainKey.TASKS, tasks)
        result = store.read("u1", DomainKey.TASKS)

        assert result.is_hit
        assert result.value == tasks
        assert result.saved_at == saved_at

    def test_missing_entry_is_miss(self, cache_store):
        from hacknotify.offline.local_cache import CacheStatus, DomainKey

        result = cache_store.read("nobody", DomainKey.TASKS)

        assert result.status == CacheStatus.MISS
        assert not result
        assert result.value is None

    def test_write_replaces_instead_of_merging(self, cache_store):
        from hacknotify.offline.local_cache import DomainKey

        cache_store.write("u1", DomainKey.TASKS, [{"id": "a"}, {"id": "b"}])
        cache_store.write("u1", DomainKey.TASKS, [{"id": "c"}])

        assert cache_store.read("u1", DomainKey.TASKS).value == [{"id": "c"}]

    def test_users_and_domains_are_isolated(self, cache_store):
        from hacknotify.offline.local_cache import DomainKey

        cache_store.write("u1", DomainKey.TASKS, ["u1 tasks"])
        cache_store.write("u2", DomainKey.TASKS, ["u2 tasks"])

        assert cache_store.read("u1", DomainKey.TASKS).value == ["u1 tasks"]
        assert cache_store.read("u2", DomainKey.TASKS).value == ["u2 tasks"]
        assert not cache_store.read("u1", DomainKey.HACKATHONS).is_hit

    def test_stored_payload_shape(self, local_db, cache_store):
        from hacknotify.offline.local_cache import DomainKey

        cache_store.write("u1", DomainKey.HACKATHONS, [{"id": "h"}])
        row = local_db.query(
            "SELECT payload FROM offline_cache WHERE cache_key = ?",
            ["hacktrackr.offline.v1.u1.hackathons"],
        )[0]
        payload = json.loads(row["payload"])

        assert set(payload) == {"savedAt", "value"}
        assert payload["value"] == [{"id": "h"}]

    def test_clear_removes_only_that_user(self, cache_store):
        from hacknotify.offline.local_cache import DomainKey

        cache_store.write("u1", DomainKey.TASKS, [1])
        cache_store.write("u1", DomainKey.HACKATHONS, [2])
        cache_store.write("u2", DomainKey.TASKS, [3])

        cache_store.clear("u1")

        assert not cache_store.read("u1", DomainKey.TASKS).is_hit
        assert not cache_store.read("u1", DomainKey.HACKATHONS).is_hit
        assert cache_store.read("u2", DomainKey.TASKS).is_hit


class TestCacheFailures:
    """Storage problems are reported, never raised"""

    def test_corrupt_payload_reads_as_error(self, local_db, cache_store):
        from hacknotify.offline.local_cache import CacheStatus, DomainKey

        local_db.execute(
            "INSERT INTO offline_cache (cache_key, user_id, domain_key, payload) VALUES (?, ?, ?, ?)",
            ["hacktrackr.offline.v1.u1.tasks", "u1", "tasks", "{not json"],
        )
        result = cache_store.read("u1", DomainKey.TASKS)

        assert result.status == CacheStatus.ERROR
        assert not result.is_hit

    def test_payload_without_saved_at_reads_as_error(self, local_db, cache_store):
        from hacknotify.offline.local_cache import CacheStatus, DomainKey

        local_db.execute(
            "INSERT INTO offline_cache (cache_key, user_id, domain_key, payload) VALUES (?, ?, ?, ?)",
            ["hacktrackr.offline.v1.u1.tasks", "u1", "tasks", json.dumps({"value": []})],
        )

        assert cache_store.read("u1", DomainKey.TASKS).status == CacheStatus.ERROR

    def test_unserializable_value_returns_error(self, cache_store):
        from hacknotify.offline.local_cache import CacheStatus, DomainKey

        result = cache_store.write("u1", DomainKey.TASKS, [object()])

        assert result.status == CacheStatus.ERROR
        assert result.error

    def test_closed_database_write_returns_error(self, tmp_path):
        from hacknotify.offline.local_cache import CacheStatus, DomainKey, LocalCacheStore
        from hacknotify.offline.local_database import LocalDatabase

        db = LocalDatabase(tmp_path / "closed.db")
        db.initialize()
        db.close()
        store = LocalCacheStore(database=db)

        assert store.write("u1", DomainKey.TASKS, []).status == CacheStatus.ERROR
        assert store.read("u1", DomainKey.TASKS).status == CacheStatus.ERROR
