# =============================================================================
# hacknotify/service_worker/registration.py
# Process-wide worker registration
# =============================================================================

from __future__ import annotations
import sqlite3
import threading
from typing import Optional
import logging

from hacknotify.config import get_settings
from hacknotify.errors import CacheStoreError, ServiceWorkerInstallError
from hacknotify.service_worker.cache_storage import CacheStorage
from hacknotify.service_worker.network import Network
from hacknotify.service_worker.worker import ServiceWorker

logger = logging.getLogger(__name__)

_service_worker: Optional[ServiceWorker] = None
_lock = threading.Lock()


def register_service_worker(
    network: Optional[Network] = None,
    storage: Optional[CacheStorage] = None,
) -> Optional[ServiceWorker]:
    """
    Install, activate and start the process-wide worker.

    A failed install (unreachable asset or unusable local storage) leaves
    the app without offline support; it is logged and None is returned, so
    registration never blocks the app.
    """
    global _service_worker
    with _lock:
        if _service_worker is not None:
            return _service_worker

        settings = get_settings()
        worker = ServiceWorker(
            network or Network(settings.base_url, timeout=settings.request_timeout),
            storage=storage,
        )
        try:
            worker.install()
            worker.activate()
        except (ServiceWorkerInstallError, CacheStoreError, sqlite3.Error) as e:
            logger.warning(f"Service worker registration failed: {e}")
            return None

        worker.start()
        _service_worker = worker
        return worker


def get_service_worker() -> Optional[ServiceWorker]:
    """The registered worker, if registration succeeded."""
    return _service_worker
