# =============================================================================
# hacknotify/service_worker/worker.py
# Offline request interceptor: install / activate / message / fetch
# =============================================================================
"""
ServiceWorker - intercepts the application's outgoing requests and resolves
them across the response cache and the network.

Lifecycle:
    install()   cache the shell manifest, all or nothing
    activate()  claim open clients, drop every other cache generation
    messages    PRECACHE_URLS commands arrive on a MessageChannel
    fetch       classify_request() -> one handler per policy

Usage:
    worker = ServiceWorker(Network(settings.base_url))
    worker.install()
    worker.activate()
    worker.start()                       # consume precache messages
    response = worker.fetch(Request.navigate("/Dashboard"))
"""

from __future__ import annotations
import queue
import sqlite3
import threading
from enum import Enum
from typing import Any, List, Optional, Sequence
import logging

from hacknotify.errors import CacheStoreError, ServiceWorkerInstallError
from hacknotify.service_worker.cache_storage import Cache, CacheStorage
from hacknotify.service_worker.messages import is_precache_message
from hacknotify.service_worker.network import HttpResponse, Network
from hacknotify.service_worker.policy import Request, RequestPolicy, classify

logger = logging.getLogger(__name__)

CACHE_NAME = "hacktrackr-pwa-v1"
STATIC_ROOT = "/app/static"
OFFLINE_URL = f"{STATIC_ROOT}/offline.html"

# Shell manifest, served from ./static by Streamlit static serving (the root
# document is the app itself). Must all be reachable at install time.
CORE_ASSETS = (
    "/",
    OFFLINE_URL,
    f"{STATIC_ROOT}/icon.svg",
    f"{STATIC_ROOT}/icon-light.svg",
    f"{STATIC_ROOT}/icon-dark.svg",
)


class WorkerState(Enum):
    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


class MessageChannel:
    """One-way channel from the application to the worker. No replies."""

    def __init__(self):
        self._queue: "queue.Queue[Any]" = queue.Queue()

    def post(self, message: Any) -> None:
        self._queue.put(message)

    def get(self, timeout: Optional[float] = None) -> Any:
        return self._queue.get(timeout=timeout)

    def get_nowait(self) -> Any:
        return self._queue.get_nowait()

    def task_done(self) -> None:
        self._queue.task_done()

    def empty(self) -> bool:
        return self._queue.empty()


class ServiceWorker:
    """
    Request interceptor with one versioned response cache.

    Background work (navigation revalidation) runs in daemon threads that
    are tracked, so callers and tests can wait for it with drain().
    """

    def __init__(
        self,
        network: Network,
        storage: Optional[CacheStorage] = None,
        cache_name: str = CACHE_NAME,
        shell_assets: Sequence[str] = CORE_ASSETS,
        offline_url: str = OFFLINE_URL,
        channel: Optional[MessageChannel] = None,
    ):
        self.network = network
        self.storage = storage or CacheStorage()
        self.cache_name = cache_name
        self.shell_assets = tuple(shell_assets)
        self.offline_url = offline_url
        self.channel = channel or MessageChannel()

        self.state = WorkerState.PARSED
        self.controls_clients = False
        self._pending: List[threading.Thread] = []
        self._pending_lock = threading.Lock()
        self._consumer: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def cache(self) -> Cache:
        return self.storage.open(self.cache_name)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def install(self) -> None:
        """
        Populate the current generation with the shell manifest.

        Raises:
            ServiceWorkerInstallError: if any asset fails; nothing is stored
        """
        self.state = WorkerState.INSTALLING
        responses = []
        for asset in self.shell_assets:
            try:
                response = self.network.fetch(asset)
            except ConnectionError as e:
                self.state = WorkerState.REDUNDANT
                raise ServiceWorkerInstallError(
                    f"Could not fetch shell asset {asset}: {e}",
                    cache_name=self.cache_name,
                    failed_url=asset,
                ) from e
            if not response.ok:
                self.state = WorkerState.REDUNDANT
                raise ServiceWorkerInstallError(
                    f"Shell asset {asset} returned HTTP {response.status}",
                    cache_name=self.cache_name,
                    failed_url=asset,
                )
            responses.append(response)

        try:
            self.cache.put_all(responses)
        except (sqlite3.Error, CacheStoreError) as e:
            self.state = WorkerState.REDUNDANT
            raise ServiceWorkerInstallError(
                f"Could not store the shell manifest: {e}",
                cache_name=self.cache_name,
            ) from e
        # skipWaiting: no waiting phase between install and activate
        self.state = WorkerState.INSTALLED
        logger.info(f"Installed {len(responses)} shell assets into {self.cache_name}")

    def activate(self) -> List[str]:
        """
        Claim clients and delete every other cache generation.

        Returns:
            Names of the deleted generations
        """
        self.state = WorkerState.ACTIVATING
        self.controls_clients = True

        deleted = []
        for name in self.storage.keys():
            if name != self.cache_name and self.storage.delete(name):
                deleted.append(name)

        self.state = WorkerState.ACTIVATED
        logger.info(f"Activated {self.cache_name}; removed {len(deleted)} old generation(s)")
        return deleted

    # =========================================================================
    # MESSAGES
    # =========================================================================

    def post_message(self, message: Any) -> None:
        """Deliver a message to the worker (application side)."""
        self.channel.post(message)

    def handle_message(self, message: Any) -> int:
        """
        Handle one message. Only PRECACHE_URLS is understood; anything else
        is ignored.

        Returns:
            Number of URLs stored
        """
        if not is_precache_message(message):
            return 0
        return self.precache(message["urls"])

    def precache(self, urls: Sequence[str]) -> int:
        """Fetch and store each URL; failures are isolated per URL."""
        cache = self.cache
        stored = 0
        for url in urls:
            try:
                response = self.network.fetch(url)
                if response.ok:
                    cache.put(self.network.resolve(url), response)
                    stored += 1
                else:
                    logger.debug(f"Precache skipped {url}: HTTP {response.status}")
            except Exception as e:
                logger.debug(f"Precache failed for {url}: {e}")
        logger.info(f"Precached {stored}/{len(urls)} URLs")
        return stored

    def process_pending_messages(self) -> int:
        """Handle every queued message on the calling thread."""
        handled = 0
        while True:
            try:
                message = self.channel.get_nowait()
            except queue.Empty:
                return handled
            try:
                self.handle_message(message)
            finally:
                self.channel.task_done()
            handled += 1

    def start(self) -> None:
        """Start consuming messages in a background thread."""
        if self._consumer is not None and self._consumer.is_alive():
            return
        self._stop.clear()
        self._consumer = threading.Thread(
            target=self._consume_loop,
            daemon=True,
            name="ServiceWorkerMessages",
        )
        self._consumer.start()

    def stop(self, timeout: float = 5) -> None:
        self._stop.set()
        if self._consumer:
            self._consumer.join(timeout=timeout)

    def _consume_loop(self) -> None:
        while not self._stop.is_set():
            try:
                message = self.channel.get(timeout=0.5)
            except queue.Empty:
                continue
            try:
                self.handle_message(message)
            except Exception as e:
                logger.error(f"Error handling worker message: {e}")
            finally:
                self.channel.task_done()

    # =========================================================================
    # FETCH
    # =========================================================================

    def fetch(self, request: Request) -> HttpResponse:
        """Resolve an outgoing request according to its policy."""
        policy = classify(request)

        if policy == RequestPolicy.PASSTHROUGH:
            response = self.network.send(request.method, request.url, headers=dict(request.headers))
            return HttpResponse.from_requests(response)
        if policy == RequestPolicy.NAVIGATION:
            return self._stale_while_revalidate(request)
        # STATIC_ASSET and DEFAULT share cache-first with write-through
        return self._cache_first(request)

    def _cache_first(self, request: Request) -> HttpResponse:
        key = self.network.resolve(request.url)
        cached = self.storage.match(key)
        if cached is not None:
            return cached

        response = self.network.fetch(request.url, headers=request.headers)
        self._store(key, response)
        return response

    def _stale_while_revalidate(self, request: Request) -> HttpResponse:
        key = self.network.resolve(request.url)
        cached = self.storage.match(key)

        if cached is not None:
            self.wait_until(self._revalidate, request, key)
            return cached

        try:
            response = self.network.fetch(request.url, headers=request.headers)
        except ConnectionError as e:
            logger.info(f"Navigation to {request.url} failed offline: {e}")
            return self._offline_document()

        self._store(key, response)
        return response

    def _revalidate(self, request: Request, key: str) -> None:
        try:
            response = self.network.fetch(request.url, headers=request.headers)
        except ConnectionError as e:
            logger.debug(f"Background refresh of {request.url} failed: {e}")
            return
        self._store(key, response)

    def _store(self, key: str, response: HttpResponse) -> None:
        if response.ok:
            self.cache.put(key, response)

    def _offline_document(self) -> HttpResponse:
        offline = self.storage.match(self.network.resolve(self.offline_url))
        if offline is not None:
            return offline
        logger.warning("Offline document missing from cache")
        return HttpResponse(
            url=self.network.resolve(self.offline_url),
            status=503,
            headers={"Content-Type": "text/plain"},
            body=b"Offline",
        )

    # =========================================================================
    # BACKGROUND WORK
    # =========================================================================

    def wait_until(self, func, *args) -> threading.Thread:
        """Run func in the background and keep track of it."""
        thread = threading.Thread(target=func, args=args, daemon=True, name="ServiceWorkerTask")
        with self._pending_lock:
            self._pending = [t for t in self._pending if t.is_alive()]
            self._pending.append(thread)
        thread.start()
        return thread

    def drain(self, timeout: float = 5) -> None:
        """Wait for tracked background work to finish."""
        with self._pending_lock:
            pending = list(self._pending)
        for thread in pending:
            thread.join(timeout=timeout)
        with self._pending_lock:
            self._pending = [t for t in self._pending if t.is_alive()]
