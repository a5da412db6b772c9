# =============================================================================
# tests/unit/test_ui_components.py
# Unit Tests for page components wired to the offline layer
# =============================================================================

import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock


@pytest.fixture
def components(monkeypatch, mock_streamlit):
    from hacknotify.errors import handlers
    from hacknotify.ui import components

    monkeypatch.setattr(components, "st", mock_streamlit)
    monkeypatch.setattr(handlers, "st", mock_streamlit)
    return components


def _fallback(saved_at=None):
    from hacknotify.offline.data_fetcher import FetchPhase, FetchResult, format_offline_info

    return FetchResult(
        phase=FetchPhase.FALLBACK,
        user={"id": "user-1"},
        offline_info=format_offline_info(saved_at),
        saved_at=saved_at,
    )


class TestOfflineBanner:
    """Fallback renders use the interceptor's offline page"""

    def test_nothing_saved_shows_offline_page(self, monkeypatch, components, mock_streamlit, worker, fake_network):
        monkeypatch.setattr(components, "get_service_worker", lambda: worker)
        fake_network.offline = True

        components.offline_banner(_fallback())

        mock_streamlit.warning.assert_called_once()
        mock_streamlit.html.assert_called_once_with("<html>offline</html>")

    def test_cached_copy_shows_only_the_notice(self, monkeypatch, components, mock_streamlit, worker):
        monkeypatch.setattr(components, "get_service_worker", lambda: worker)

        components.offline_banner(_fallback(datetime(2025, 3, 11, 18, 0, tzinfo=timezone.utc)))

        assert "2025-03-11" in mock_streamlit.warning.call_args.args[0]
        mock_streamlit.html.assert_not_called()

    def test_live_read_shows_nothing(self, components, mock_streamlit):
        from hacknotify.offline.data_fetcher import FetchPhase, FetchResult

        components.offline_banner(FetchResult(phase=FetchPhase.SUCCESS))

        mock_streamlit.warning.assert_not_called()

    def test_without_worker_no_offline_page(self, monkeypatch, components, mock_streamlit):
        monkeypatch.setattr(components, "get_service_worker", lambda: None)

        assert components.offline_document() is None
        components.offline_banner(_fallback())

        mock_streamlit.html.assert_not_called()


class TestDetailLinks:
    """Rows link to the detail pages that sign-in precaches"""

    def test_detail_url(self):
        from hacknotify.offline.precache import detail_url

        assert detail_url("tasks", "t-1") == "/Task?id=t-1"
        assert detail_url("hackathons", "a b/c") == "/Hackathon?id=a%20b%2Fc"

    def test_task_item_links_detail_page(self, components, mock_streamlit, sample_tasks, now):
        components.task_item(sample_tasks[1], now)

        line = mock_streamlit.markdown.call_args.args[0]
        assert "(/Task?id=t-2)" in line
        assert "overdue" in line


class TestSaveTask:
    """Task writes report failures on the page"""

    def test_success(self, components, mock_streamlit):
        gateway = MagicMock()

        assert components.save_task(gateway, "t-1", {"status": "done"})
        gateway.update_task.assert_called_once_with("t-1", {"status": "done"})
        mock_streamlit.error.assert_not_called()

    def test_backend_failure_is_shown_and_reported(self, components, mock_streamlit):
        from hacknotify.errors import BackendError

        gateway = MagicMock()
        gateway.update_task.side_effect = BackendError("permission denied", table="tasks", operation="update")

        assert components.save_task(gateway, "t-1", {"status": "done"}) is False
        mock_streamlit.error.assert_called_once()
