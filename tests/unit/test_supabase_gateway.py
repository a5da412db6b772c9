# =============================================================================
# tests/unit/test_supabase_gateway.py
# Unit Tests for the per-session Supabase client and gateway queries
# =============================================================================

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock


class FakeAuth:
    """supabase auth double holding one in-memory session"""

    def __init__(self):
        self.session = None

    def sign_in_with_password(self, credentials):
        user = SimpleNamespace(id=f"id-{credentials['email']}", email=credentials["email"],
                               user_metadata={"name": credentials["email"].split("@")[0]})
        self.session = SimpleNamespace(user=user)
        return SimpleNamespace(user=user)

    def get_session(self):
        return self.session

    def sign_out(self):
        self.session = None


@pytest.fixture
def client_factory(monkeypatch):
    """Every call to get_supabase_client builds a fresh client"""
    from hacknotify.data import supabase_client

    created = []

    def make_client():
        client = MagicMock()
        client.auth = FakeAuth()
        created.append(client)
        return client

    monkeypatch.setattr(supabase_client, "get_supabase_client", make_client)
    return created


def _use_browser_session(monkeypatch, session_state):
    from hacknotify.data import supabase_client

    fake_st = MagicMock()
    fake_st.session_state = session_state
    monkeypatch.setattr(supabase_client, "st", fake_st)


class TestSessionClient:
    """Each browser session has its own client and auth session"""

    def test_sessions_do_not_share_sign_in(self, monkeypatch, client_factory):
        from hacknotify.data.supabase_client import get_gateway

        browser_a, browser_b = {}, {}

        _use_browser_session(monkeypatch, browser_a)
        get_gateway().sign_in("ada@example.com", "pw")
        assert get_gateway().get_session_user()["email"] == "ada@example.com"

        _use_browser_session(monkeypatch, browser_b)
        assert get_gateway().get_session_user() is None

        get_gateway().sign_in("bob@example.com", "pw")
        _use_browser_session(monkeypatch, browser_a)
        assert get_gateway().get_session_user()["email"] == "ada@example.com"
        assert len(client_factory) == 2

    def test_client_reused_within_a_session(self, monkeypatch, client_factory):
        from hacknotify.data.supabase_client import SESSION_CLIENT_KEY, get_session_client

        session_state = {}
        _use_browser_session(monkeypatch, session_state)

        first = get_session_client()

        assert get_session_client() is first
        assert session_state[SESSION_CLIENT_KEY] is first
        assert len(client_factory) == 1

    def test_sign_out_ends_only_own_session(self, monkeypatch, client_factory):
        from hacknotify.data.supabase_client import get_gateway

        browser_a, browser_b = {}, {}
        _use_browser_session(monkeypatch, browser_a)
        get_gateway().sign_in("ada@example.com", "pw")
        _use_browser_session(monkeypatch, browser_b)
        get_gateway().sign_in("bob@example.com", "pw")

        get_gateway().sign_out()

        assert get_gateway().get_session_user() is None
        _use_browser_session(monkeypatch, browser_a)
        assert get_gateway().get_session_user()["email"] == "ada@example.com"


class TestQueries:
    """Query chains sent to Supabase"""

    def test_id_page_is_ordered_by_id_before_range(self, mock_supabase):
        from hacknotify.data.supabase_client import SupabaseGateway

        chain = mock_supabase.table.return_value.select.return_value.in_.return_value
        chain.order.return_value.range.return_value.execute.return_value.data = [
            {"id": "t-1"}, {"id": "t-2"},
        ]

        ids = SupabaseGateway(mock_supabase).fetch_id_page("tasks", ["team-1"], 0, 999)

        assert ids == ["t-1", "t-2"]
        mock_supabase.table.assert_called_once_with("tasks")
        mock_supabase.table.return_value.select.assert_called_once_with("id")
        mock_supabase.table.return_value.select.return_value.in_.assert_called_once_with("team_id", ["team-1"])
        chain.order.assert_called_once_with("id")
        chain.order.return_value.range.assert_called_once_with(0, 999)
        chain.range.assert_not_called()

    def test_id_page_failure_is_backend_error(self, mock_supabase):
        from hacknotify.data.supabase_client import SupabaseGateway
        from hacknotify.errors import BackendError

        mock_supabase.table.side_effect = RuntimeError("connection reset")

        with pytest.raises(BackendError) as exc_info:
            SupabaseGateway(mock_supabase).fetch_id_page("hackathons", ["team-1"], 0, 999)

        assert exc_info.value.details["table"] == "hackathons"

    def test_update_task(self, mock_supabase):
        from hacknotify.data.supabase_client import SupabaseGateway

        SupabaseGateway(mock_supabase).update_task("t-1", {"status": "done"})

        mock_supabase.table.assert_called_once_with("tasks")
        mock_supabase.table.return_value.update.assert_called_once_with({"status": "done"})
        mock_supabase.table.return_value.update.return_value.eq.assert_called_once_with("id", "t-1")

    def test_update_without_client_raises(self):
        from hacknotify.data.supabase_client import SupabaseGateway
        from hacknotify.errors import BackendError

        with pytest.raises(BackendError):
            SupabaseGateway(None).update_task("t-1", {"status": "done"})
