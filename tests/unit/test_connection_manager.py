# =============================================================================
# tests/unit/test_connection_manager.py
# Unit Tests for ConnectivitySignal and ConnectionMonitor
# =============================================================================

from unittest.mock import MagicMock


class TestConnectivitySignal:
    """Test the observable online flag"""

    def test_initial_value(self):
        from hacknotify.offline.connection_manager import ConnectivitySignal

        assert ConnectivitySignal(initial=True).is_online
        assert ConnectivitySignal(initial=False).is_offline

    def test_subscribers_notified_on_transition(self):
        from hacknotify.offline.connection_manager import ConnectivitySignal

        signal = ConnectivitySignal(initial=True)
        seen = []
        signal.subscribe(seen.append)

        signal.handle_offline_event()
        signal.handle_online_event()

        assert seen == [False, True]

    def test_no_notification_without_change(self):
        from hacknotify.offline.connection_manager import ConnectivitySignal

        signal = ConnectivitySignal(initial=True)
        callback = MagicMock()
        signal.subscribe(callback)

        signal.handle_online_event()

        callback.assert_not_called()

    def test_unsubscribe_callable(self):
        from hacknotify.offline.connection_manager import ConnectivitySignal

        signal = ConnectivitySignal(initial=True)
        callback = MagicMock()
        unsubscribe = signal.subscribe(callback)

        unsubscribe()
        signal.handle_offline_event()

        callback.assert_not_called()
        assert signal.subscriber_count == 0

    def test_failing_callback_does_not_block_others(self):
        from hacknotify.offline.connection_manager import ConnectivitySignal

        signal = ConnectivitySignal(initial=True)
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        signal.subscribe(broken)
        signal.subscribe(healthy)

        signal.handle_offline_event()

        healthy.assert_called_once_with(False)
        assert signal.is_offline

    def test_can_mutate_follows_signal(self):
        from hacknotify.offline.connection_manager import ConnectivitySignal, can_mutate

        signal = ConnectivitySignal(initial=True)
        assert can_mutate(signal)

        signal.handle_offline_event()
        assert not can_mutate(signal)


class TestConnectionMonitor:
    """Test reachability probing"""

    def test_check_connection_emits_offline_event(self):
        from hacknotify.offline.connection_manager import ConnectionMonitor, ConnectivitySignal

        signal = ConnectivitySignal(initial=True)
        monitor = ConnectionMonitor(signal, backend_url="https://project.supabase.co")
        monitor._can_connect = MagicMock(return_value=False)

        assert monitor.check_connection() is False
        assert signal.is_offline
        assert monitor.state.consecutive_failures == 1

    def test_backend_probed_on_its_own_port(self):
        from hacknotify.offline.connection_manager import ConnectionMonitor, ConnectivitySignal

        signal = ConnectivitySignal(initial=False)
        monitor = ConnectionMonitor(signal, backend_url="https://project.supabase.co")
        monitor._can_connect = MagicMock(return_value=True)

        assert monitor.check_connection() is True
        assert signal.is_online
        monitor._can_connect.assert_any_call("project.supabase.co", 443)
        assert monitor.state.last_online is not None
