# =============================================================================
# hacknotify/offline/precache.py
# Post-login cache warm-up
# =============================================================================
"""
PrecacheOrchestrator - after a successful sign-in, tells the request
interceptor which pages to fetch ahead of time so they open offline:

1. the core shell routes, immediately
2. every task and hackathon detail page of the user's teams, collected
   page by page and sent in small batches

It runs once, in a background thread, behind its own error boundary:
nothing it does can fail or slow down the sign-in.
"""

from __future__ import annotations
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import quote
import logging

from hacknotify.data.supabase_client import SupabaseGateway
from hacknotify.errors import error_boundary
from hacknotify.service_worker.messages import precache_message

logger = logging.getLogger(__name__)

# Multipage URLs of the app (pages/NN_<Name>.py is served at /<Name>)
CORE_ROUTES = ("/", "/Dashboard", "/Hackathons", "/Tasks")
PAGE_SIZE = 500
BATCH_SIZE = 150

# Tables whose rows have a detail page, and that page's URL
DETAIL_ROUTES = (
    ("tasks", "/Task?id={id}"),
    ("hackathons", "/Hackathon?id={id}"),
)

PostMessage = Callable[[Dict[str, Any]], None]


def detail_url(table: str, row_id: Any) -> str:
    """URL of the detail page of one row, e.g. /Task?id=<id>."""
    template = dict(DETAIL_ROUTES)[table]
    return template.format(id=quote(str(row_id), safe=""))


def chunked(items: Sequence[str], size: int) -> List[List[str]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class PrecacheOrchestrator:
    """
    Usage:
        orchestrator = PrecacheOrchestrator(gateway, worker.post_message)
        orchestrator.start(user_id)
    """

    def __init__(
        self,
        gateway: SupabaseGateway,
        post_message: PostMessage,
        page_size: int = PAGE_SIZE,
        batch_size: int = BATCH_SIZE,
        core_routes: Sequence[str] = CORE_ROUTES,
    ):
        self.gateway = gateway
        self.post_message = post_message
        self.page_size = page_size
        self.batch_size = batch_size
        self.core_routes = tuple(core_routes)
        self._thread: Optional[threading.Thread] = None

    def _post(self, urls: Sequence[str]) -> None:
        self.post_message(precache_message(urls))

    def collect_ids(self, table: str, team_ids: Sequence[str]) -> List[str]:
        """
        Page through the ids of a table. Stops at the first short page or
        the first error; ids collected so far are kept.
        """
        ids: List[str] = []
        start = 0
        while True:
            end = start + self.page_size - 1
            try:
                batch = self.gateway.fetch_id_page(table, team_ids, start, end)
            except Exception as e:
                logger.debug(f"Stopped paging {table} at row {start}: {e}")
                break
            ids.extend(batch)
            if len(batch) < self.page_size:
                break
            start += self.page_size
        return ids

    def run(self, user_id: str) -> int:
        """
        The whole warm-up, on the calling thread.

        Returns:
            Number of detail URLs dispatched
        """
        self._post(self.core_routes)

        team_ids = self.gateway.get_team_ids(user_id)
        if not team_ids:
            return 0

        urls: List[str] = []
        for table, _ in DETAIL_ROUTES:
            urls.extend(detail_url(table, row_id) for row_id in self.collect_ids(table, team_ids))

        for batch in chunked(urls, self.batch_size):
            self._post(batch)

        logger.info(f"Dispatched {len(urls)} detail pages for precaching")
        return len(urls)

    def start(self, user_id: str) -> threading.Thread:
        """Fire-and-forget: run() in a daemon thread, errors logged only."""
        self._thread = threading.Thread(
            target=error_boundary(default_return=0)(self.run),
            args=(user_id,),
            daemon=True,
            name="PrecacheOrchestrator",
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)
