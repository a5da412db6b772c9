# =============================================================================
# tests/unit/test_network.py
# Unit Tests for the requests-backed Network
# =============================================================================

import pytest
import requests
from unittest.mock import MagicMock


def _response(status, body=b"", url="https://app.test/"):
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.content = body
    response.headers = {"Content-Type": "text/html"}
    response.url = url
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestResolve:
    """Paths are resolved against the application origin"""

    def test_relative_and_absolute_urls(self, session):
        from hacknotify.service_worker.network import Network

        network = Network("https://app.test", session=session)

        assert network.resolve("/Task?id=t-1") == "https://app.test/Task?id=t-1"
        assert network.resolve("Dashboard") == "https://app.test/Dashboard"
        assert network.resolve("https://cdn.test/x.js") == "https://cdn.test/x.js"


class TestFetch:
    """GET through the session"""

    def test_ok_response_snapshot(self, session):
        from hacknotify.service_worker.network import Network

        session.get.return_value = _response(200, b"<html>home</html>")

        response = Network("https://app.test/", session=session, timeout=3).fetch("/", {"Accept": "text/html"})

        session.get.assert_called_once_with("https://app.test/", headers={"Accept": "text/html"}, timeout=3)
        assert response.ok
        assert response.url == "https://app.test/"
        assert response.body == b"<html>home</html>"

    def test_http_error_status_is_returned(self, session):
        from hacknotify.service_worker.network import Network

        session.get.return_value = _response(404, b"not found")

        response = Network("https://app.test", session=session).fetch("/missing")

        assert response.status == 404
        assert not response.ok

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("timed out"),
    ])
    def test_transport_failure_is_connection_error(self, session, error):
        from hacknotify.service_worker.network import Network

        session.get.side_effect = error

        with pytest.raises(ConnectionError) as exc_info:
            Network("https://app.test", session=session).fetch("/Dashboard")

        assert "https://app.test/Dashboard" in str(exc_info.value)
        assert exc_info.value.__cause__ is error


class TestSend:
    """Non-GET requests go out untouched"""

    def test_send_uses_session_request(self, session):
        from hacknotify.service_worker.network import Network

        session.request.return_value = _response(201, b"created")

        response = Network("https://app.test", session=session, timeout=4).send(
            "POST", "/api/tasks", headers={"X-Test": "1"}
        )

        session.request.assert_called_once_with(
            "POST", "https://app.test/api/tasks", headers={"X-Test": "1"}, timeout=4
        )
        assert response.status_code == 201

    def test_worker_passthrough_goes_through_send(self, session, cache_storage):
        from hacknotify.service_worker.network import Network
        from hacknotify.service_worker.policy import Request
        from hacknotify.service_worker.worker import ServiceWorker

        session.request.return_value = _response(201, b"created", url="https://app.test/api/tasks")
        worker = ServiceWorker(Network("https://app.test", session=session), storage=cache_storage)

        response = worker.fetch(Request("/api/tasks", method="POST"))

        assert response.status == 201
        session.request.assert_called_once()
        session.get.assert_not_called()
        assert cache_storage.match("https://app.test/api/tasks") is None


class TestWorkerOverNetwork:
    """The worker over a real Network whose session has gone offline"""

    def test_offline_navigation_serves_offline_document(self, session, cache_storage):
        from hacknotify.service_worker.network import Network
        from hacknotify.service_worker.policy import Request
        from hacknotify.service_worker.worker import CORE_ASSETS, OFFLINE_URL, ServiceWorker

        pages = {f"https://app.test{path}": _response(200, f"<html>{path}</html>".encode()) for path in CORE_ASSETS}
        session.get.side_effect = lambda url, **kwargs: pages[url]
        worker = ServiceWorker(Network("https://app.test", session=session), storage=cache_storage)
        worker.install()
        worker.activate()

        session.get.side_effect = requests.exceptions.ConnectionError("offline")
        response = worker.fetch(Request.navigate("/Task?id=t-404"))

        assert response.body == f"<html>{OFFLINE_URL}</html>".encode()
