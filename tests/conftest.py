# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from unittest.mock import MagicMock


NOW = datetime(2025, 3, 12, 9, 0, tzinfo=timezone.utc)  # a Wednesday


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def now():
    """Fixed reference instant"""
    return NOW


@pytest.fixture
def sample_user():
    return {"id": "user-1", "email": "ada@example.com", "name": "Ada"}


@pytest.fixture
def sample_hackathons(now):
    """Three hackathons: one due in 2 days, one in 10 days, one finished"""
    return [
        {
            "id": "h-soon",
            "team_id": "team-1",
            "title": "Spring Hack",
            "reg_deadline": None,
            "submission_deadline": (now + timedelta(days=2)).isoformat(),
        },
        {
            "id": "h-later",
            "team_id": "team-1",
            "title": "Summer Hack",
            "reg_deadline": (now + timedelta(days=10)).isoformat(),
            "submission_deadline": (now + timedelta(days=20)).isoformat(),
        },
        {
            "id": "h-past",
            "team_id": "team-1",
            "title": "Winter Hack",
            "reg_deadline": (now - timedelta(days=40)).isoformat(),
            "submission_deadline": (now - timedelta(days=30)).isoformat(),
        },
    ]


@pytest.fixture
def sample_tasks(now):
    return [
        {"id": "t-1", "team_id": "team-1", "title": "Pitch deck", "status": "todo",
         "assigned_to": "user-1", "deadline": (now + timedelta(days=1)).isoformat()},
        {"id": "t-2", "team_id": "team-1", "title": "Demo video", "status": "doing",
         "assigned_to": "user-1", "deadline": (now - timedelta(days=1)).isoformat()},
        {"id": "t-3", "team_id": "team-1", "title": "Register team", "status": "done",
         "assigned_to": "user-2", "deadline": (now - timedelta(days=3)).isoformat()},
        {"id": "t-4", "team_id": "team-1", "title": "Book room", "status": "todo",
         "assigned_to": "user-2", "deadline": None},
    ]


# =============================================================================
# MOCK FIXTURES
# =============================================================================

def _passthrough_decorator(*args, **kwargs):
    # Supports both @st.cache_resource and @st.cache_resource(ttl=...)
    if len(args) == 1 and callable(args[0]) and not kwargs:
        return args[0]
    return lambda f: f


@pytest.fixture
def mock_streamlit():
    """Mock Streamlit for testing"""
    import sys

    # Create mock streamlit module
    mock_st = MagicMock()
    mock_st.session_state = {}
    mock_st.secrets = {}
    mock_st.cache_data = _passthrough_decorator
    mock_st.cache_resource = _passthrough_decorator

    # Store original and replace
    original_st = sys.modules.get('streamlit')
    sys.modules['streamlit'] = mock_st

    yield mock_st

    # Restore original
    if original_st:
        sys.modules['streamlit'] = original_st


@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client


@pytest.fixture
def local_db(tmp_path):
    """Fresh on-disk local database"""
    from hacknotify.offline.local_database import LocalDatabase

    db = LocalDatabase(tmp_path / "hacknotify.db")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def cache_store(local_db):
    from hacknotify.offline.local_cache import LocalCacheStore
    return LocalCacheStore(database=local_db)


# =============================================================================
# FAKE NETWORK
# =============================================================================

class FakeNetwork:
    """
    Stands in for service_worker.network.Network.

    `routes` maps a path to (status, body). Paths in `failing` raise
    ConnectionError; `offline = True` makes every request fail.
    """

    base_url = "https://app.test/"

    def __init__(self, routes: Optional[Dict[str, tuple]] = None):
        self.routes = dict(routes or {})
        self.failing = set()
        self.offline = False
        self.calls: List[str] = []

    def resolve(self, url: str) -> str:
        from urllib.parse import urljoin
        return urljoin(self.base_url, url)

    def fetch(self, url, headers=None):
        from hacknotify.service_worker.network import HttpResponse

        self.calls.append(url)
        if self.offline or url in self.failing:
            raise ConnectionError(f"unreachable: {url}")
        status, body = self.routes.get(url, (404, b"not found"))
        return HttpResponse(url=self.resolve(url), status=status, body=body,
                            headers={"Content-Type": "text/html"})

    def send(self, method, url, **kwargs):
        self.calls.append(f"{method} {url}")
        response = MagicMock()
        response.url = self.resolve(url)
        response.status_code = 201
        response.headers = {}
        response.content = b"created"
        return response


SHELL_ROUTES = {
    "/": (200, b"<html>home</html>"),
    "/app/static/offline.html": (200, b"<html>offline</html>"),
    "/app/static/icon.svg": (200, b"<svg/>"),
    "/app/static/icon-light.svg": (200, b"<svg/>"),
    "/app/static/icon-dark.svg": (200, b"<svg/>"),
}


@pytest.fixture
def fake_network():
    return FakeNetwork(SHELL_ROUTES)


@pytest.fixture
def cache_storage(local_db):
    from hacknotify.service_worker.cache_storage import CacheStorage
    return CacheStorage(database=local_db)


@pytest.fixture
def worker(fake_network, cache_storage):
    """Installed and activated worker over the fake network"""
    from hacknotify.service_worker.worker import ServiceWorker

    sw = ServiceWorker(fake_network, storage=cache_storage)
    sw.install()
    sw.activate()
    fake_network.calls.clear()
    yield sw
    sw.drain()
    sw.stop()


# =============================================================================
# FAKE GATEWAY
# =============================================================================

class FakeGateway:
    """In-memory SupabaseGateway with switchable failures"""

    def __init__(self, user=None, team_ids=None, hackathons=None, tasks=None):
        self.user = user
        self.team_ids = list(team_ids or [])
        self.hackathons = list(hackathons or [])
        self.tasks = list(tasks or [])
        self.fail_membership = False
        self.fail_queries = False
        self.calls: List[str] = []

    def get_session_user(self):
        return self.user

    def get_team_ids(self, user_id):
        self.calls.append("team_members")
        if self.fail_membership:
            from hacknotify.errors import BackendError
            raise BackendError("network down", table="team_members", operation="select")
        return list(self.team_ids)

    def _check(self, table):
        self.calls.append(table)
        if self.fail_queries:
            from hacknotify.errors import BackendError
            raise BackendError("network down", table=table, operation="select")

    def fetch_hackathons(self, team_ids):
        self._check("hackathons")
        return list(self.hackathons)

    def fetch_tasks(self, team_ids, order_by="deadline", ascending=True):
        self._check("tasks")
        return sorted(self.tasks, key=lambda t: t.get(order_by) or "", reverse=not ascending)


@pytest.fixture
def fake_gateway(sample_user):
    return FakeGateway(user=sample_user, team_ids=["team-1"])


@pytest.fixture
def gateway_factory():
    return FakeGateway
