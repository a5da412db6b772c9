# =============================================================================
# tests/integration/test_offline_scenarios.py
# End-to-end offline behaviour: fetchers, cache and request interceptor
# =============================================================================

import pytest
from datetime import timedelta
from unittest.mock import MagicMock


class TestScreenScenarios:
    """Fetch cycle plus derived views, as a screen renders them"""

    def test_new_user_without_team(self, gateway_factory, sample_user, cache_store):
        from hacknotify.offline.data_fetcher import DashboardFetcher, FetchPhase

        gateway = gateway_factory(user=sample_user, team_ids=[])

        result = DashboardFetcher(gateway, cache_store).fetch()

        assert result.phase == FetchPhase.NO_TEAM
        assert "hackathons" not in gateway.calls
        assert "tasks" not in gateway.calls

    def test_online_dashboard_shows_urgent_and_caches(
        self, fake_gateway, sample_hackathons, cache_store, now
    ):
        from hacknotify.analytics.derived_views import urgent_deadlines
        from hacknotify.offline.data_fetcher import DashboardFetcher, FetchPhase
        from hacknotify.offline.local_cache import DomainKey

        fake_gateway.hackathons = sample_hackathons

        result = DashboardFetcher(fake_gateway, cache_store).fetch()

        assert result.phase == FetchPhase.SUCCESS
        assert [h["id"] for h in urgent_deadlines(result.hackathons, now)] == ["h-soon"]
        cached = cache_store.read("user-1", DomainKey.HACKATHONS)
        assert cached.is_hit
        assert len(cached.value) == 3

    def test_outage_renders_two_hour_old_tasks(self, fake_gateway, local_db, now):
        from hacknotify.offline.data_fetcher import FetchPhase, TaskListFetcher
        from hacknotify.offline.local_cache import DomainKey, LocalCacheStore

        two_hours_ago = now - timedelta(hours=2)
        LocalCacheStore(local_db, clock=lambda: two_hours_ago).write(
            "user-1", DomainKey.TASKS, [{"id": "t-1"}, {"id": "t-2"}]
        )
        fake_gateway.fail_queries = True

        result = TaskListFetcher(fake_gateway, LocalCacheStore(local_db)).fetch()

        assert result.phase == FetchPhase.FALLBACK
        assert len(result.tasks) == 2
        assert result.offline_info == f"Offline • showing cached data from {two_hours_ago.isoformat()}"

    def test_recovery_overwrites_cache(self, fake_gateway, cache_store, sample_tasks):
        from hacknotify.offline.data_fetcher import FetchPhase, TaskListFetcher
        from hacknotify.offline.local_cache import DomainKey

        cache_store.write("user-1", DomainKey.TASKS, [{"id": "stale"}])
        fake_gateway.tasks = sample_tasks

        result = TaskListFetcher(fake_gateway, cache_store).fetch()

        assert result.phase == FetchPhase.SUCCESS
        ids = [t["id"] for t in cache_store.read("user-1", DomainKey.TASKS).value]
        assert "stale" not in ids
        assert len(ids) == len(sample_tasks)


class TestSignInWarmUp:
    """Sign-in precaches detail pages that then open offline"""

    @pytest.fixture
    def paging_gateway(self, sample_user):
        gateway = MagicMock()
        gateway.sign_in.return_value = sample_user
        gateway.get_team_ids.return_value = ["team-1"]
        pages = {"tasks": ["t-1", "t-2"], "hackathons": ["h-1"]}
        gateway.fetch_id_page.side_effect = lambda table, teams, start, end: pages[table][start:end + 1]
        return gateway

    def test_detail_pages_available_offline(self, worker, fake_network, paging_gateway):
        from hacknotify.auth.authentication import AuthService
        from hacknotify.service_worker.policy import Request

        fake_network.routes.update({
            "/Task?id=t-1": (200, b"<html>task 1</html>"),
            "/Task?id=t-2": (200, b"<html>task 2</html>"),
            "/Hackathon?id=h-1": (200, b"<html>hackathon 1</html>"),
            "/Dashboard": (200, b"<html>dashboard</html>"),
        })

        auth = AuthService(paging_gateway, post_message=worker.post_message)
        assert auth.sign_in("ada@example.com", "pw")
        auth.orchestrator.join(timeout=5)
        worker.process_pending_messages()

        fake_network.offline = True

        assert worker.fetch(Request.navigate("/Task?id=t-2")).body == b"<html>task 2</html>"
        assert worker.fetch(Request.navigate("/Hackathon?id=h-1")).body == b"<html>hackathon 1</html>"
        assert worker.fetch(Request.navigate("/Dashboard")).body == b"<html>dashboard</html>"
        assert worker.fetch(Request.navigate("/Task?id=t-9")).body == b"<html>offline</html>"
