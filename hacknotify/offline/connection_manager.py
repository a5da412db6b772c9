# =============================================================================
# hacknotify/offline/connection_manager.py
# Online/Offline Signal and Reachability Monitoring
# =============================================================================
"""
ConnectivitySignal - process-wide observable "is online" flag.
ConnectionMonitor  - platform side: probes reachability and emits transitions.

The signal only gates state-mutating actions in the UI (create, edit,
status changes). Data fetchers always attempt the network regardless of it,
since the flag can be stale or wrong (captive portals, flaky Wi-Fi).

Usage:
    signal = get_connectivity_signal()
    unsubscribe = signal.subscribe(lambda online: print("online:", online))
    ...
    unsubscribe()
"""

from __future__ import annotations
import socket
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlparse
import logging

logger = logging.getLogger(__name__)

ConnectivityCallback = Callable[[bool], None]


class ConnectivitySignal:
    """
    Observable boolean reflecting network reachability.

    Only the platform hooks (handle_online_event / handle_offline_event)
    change the value. Subscribers are notified synchronously, in
    subscription order, and only on an actual transition.
    """

    def __init__(self, initial: bool = True):
        self._is_online = bool(initial)
        self._callbacks: List[ConnectivityCallback] = []
        self._lock = threading.RLock()

    @property
    def is_online(self) -> bool:
        return self._is_online

    @property
    def is_offline(self) -> bool:
        return not self._is_online

    def subscribe(self, callback: ConnectivityCallback) -> Callable[[], None]:
        """
        Register a callback for transitions.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: ConnectivityCallback) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    # Platform hooks ---------------------------------------------------------

    def handle_online_event(self) -> None:
        self._transition(True)

    def handle_offline_event(self) -> None:
        self._transition(False)

    def _transition(self, online: bool) -> None:
        with self._lock:
            if self._is_online == online:
                return
            self._is_online = online
            callbacks = list(self._callbacks)

        logger.info(f"Connectivity changed: {'online' if online else 'offline'}")
        for callback in callbacks:
            try:
                callback(online)
            except Exception as e:
                logger.error(f"Error in connectivity callback: {e}")


@dataclass
class ConnectionState:
    """Last probe result with metadata."""
    internet_available: bool = False
    backend_available: bool = False
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0


class ConnectionMonitor:
    """
    Probes internet and backend reachability and feeds the result into a
    ConnectivitySignal as online/offline events.

    Usage:
        monitor = ConnectionMonitor(signal, backend_url=settings.supabase_url)
        monitor.start()
    """

    CHECK_INTERVAL_ONLINE = 30      # Seconds between checks when online
    CHECK_INTERVAL_OFFLINE = 10     # Seconds between checks when offline
    CONNECTION_TIMEOUT = 3          # Timeout for connection tests

    PROBE_HOSTS: Tuple[Tuple[str, int], ...] = (
        ("1.1.1.1", 53),        # Cloudflare DNS
        ("8.8.8.8", 53),        # Google DNS
    )

    def __init__(self, signal: ConnectivitySignal, backend_url: Optional[str] = None):
        self.signal = signal
        self.backend_url = backend_url
        self._state = ConnectionState()
        self._monitor_thread: Optional[threading.Thread] = None
        self._stop_monitoring = threading.Event()

    @property
    def state(self) -> ConnectionState:
        return self._state

    def _can_connect(self, host: str, port: int) -> bool:
        try:
            with socket.create_connection((host, port), timeout=self.CONNECTION_TIMEOUT):
                return True
        except OSError:
            return False

    def _check_internet(self) -> bool:
        return any(self._can_connect(host, port) for host, port in self.PROBE_HOSTS)

    def _check_backend(self) -> bool:
        if not self.backend_url:
            # No backend configured - reachability is decided by internet alone
            return True

        parsed = urlparse(self.backend_url)
        if not parsed.hostname:
            return False
        port = parsed.port or (443 if parsed.scheme == "https" else 80)
        return self._can_connect(parsed.hostname, port)

    def probe(self) -> bool:
        """Run one reachability check without touching the signal."""
        internet_ok = self._check_internet()
        backend_ok = internet_ok and self._check_backend()

        self._state.internet_available = internet_ok
        self._state.backend_available = backend_ok
        self._state.last_check = datetime.now()
        if backend_ok:
            self._state.last_online = self._state.last_check
            self._state.consecutive_failures = 0
        else:
            self._state.consecutive_failures += 1
        return backend_ok

    def check_connection(self) -> bool:
        """Probe and emit the matching platform event."""
        online = self.probe()
        if online:
            self.signal.handle_online_event()
        else:
            self.signal.handle_offline_event()
        return online

    def start(self) -> None:
        """Start background connection monitoring."""
        if self._monitor_thread is not None and self._monitor_thread.is_alive():
            return

        self._stop_monitoring.clear()
        self._monitor_thread = threading.Thread(
            target=self._monitoring_loop,
            daemon=True,
            name="ConnectionMonitor"
        )
        self._monitor_thread.start()
        logger.debug("Connection monitoring started")

    def stop(self) -> None:
        """Stop background connection monitoring."""
        self._stop_monitoring.set()
        if self._monitor_thread:
            self._monitor_thread.join(timeout=5)
        logger.debug("Connection monitoring stopped")

    def _monitoring_loop(self) -> None:
        while not self._stop_monitoring.is_set():
            interval = (
                self.CHECK_INTERVAL_ONLINE
                if self.signal.is_online
                else self.CHECK_INTERVAL_OFFLINE
            )

            if self._stop_monitoring.wait(timeout=interval):
                break

            try:
                self.check_connection()
            except Exception as e:
                logger.error(f"Error in connection check: {e}")


# Singleton accessors
_connectivity_signal: Optional[ConnectivitySignal] = None
_connection_monitor: Optional[ConnectionMonitor] = None
_singleton_lock = threading.Lock()


def get_connectivity_signal(start_monitoring: bool = True) -> ConnectivitySignal:
    """
    Get the process-wide ConnectivitySignal.

    On first use the signal is initialized from a reachability probe and,
    optionally, a background monitor keeps it current.
    """
    global _connectivity_signal, _connection_monitor
    if _connectivity_signal is None:
        with _singleton_lock:
            if _connectivity_signal is None:
                from hacknotify.config import get_settings

                signal = ConnectivitySignal(initial=True)
                monitor = ConnectionMonitor(signal, backend_url=get_settings().supabase_url)
                monitor.check_connection()
                if start_monitoring:
                    monitor.start()
                _connection_monitor = monitor
                _connectivity_signal = signal
                logger.info(f"Connectivity signal initialized. Online: {signal.is_online}")
    return _connectivity_signal


def get_connection_monitor() -> Optional[ConnectionMonitor]:
    """The monitor backing the process-wide signal, if one was started."""
    return _connection_monitor


def can_mutate(signal: Optional[ConnectivitySignal] = None) -> bool:
    """Whether state-mutating actions (create/edit/move) should be enabled."""
    return (signal or get_connectivity_signal()).is_online
