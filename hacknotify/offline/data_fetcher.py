# =============================================================================
# hacknotify/offline/data_fetcher.py
# Network-first data fetchers with last-known-good fallback
# =============================================================================
"""
Data fetchers for the dashboard, hackathon list and task list screens.

One fetch cycle:

    IDLE -> LOADING -> SUCCESS    authoritative read ok, cache written through
                    -> FALLBACK   read failed, cached copy (or nothing) shown
                    -> NO_TEAM    user has no team yet (onboarding)
    SIGNED_OUT                    no local session

The cache is read only after the authoritative read has failed. A fallback
is a degraded-but-valid result: the error is logged, never returned.
"""

from __future__ import annotations
from abc import abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from hacknotify.data.supabase_client import SupabaseGateway
from hacknotify.offline.local_cache import DomainKey, LocalCacheStore, get_local_cache_store
from hacknotify.services.base_service import BaseService

OFFLINE_CACHED_TEMPLATE = "Offline • showing cached data from {saved_at}"
OFFLINE_EMPTY_MESSAGE = "Offline • no cached data yet"


class FetchPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FALLBACK = "fallback"
    NO_TEAM = "no_team"
    SIGNED_OUT = "signed_out"


@dataclass
class FetchResult:
    """What a screen renders after one fetch cycle."""
    phase: FetchPhase
    user: Optional[Dict[str, Any]] = None
    collections: Dict[DomainKey, List[Dict[str, Any]]] = field(default_factory=dict)
    offline_info: Optional[str] = None
    saved_at: Optional[datetime] = None

    @property
    def is_stale(self) -> bool:
        return self.phase == FetchPhase.FALLBACK

    @property
    def user_id(self) -> Optional[str]:
        return self.user["id"] if self.user else None

    def get(self, domain_key: DomainKey) -> List[Dict[str, Any]]:
        return self.collections.get(DomainKey(domain_key), [])

    @property
    def hackathons(self) -> List[Dict[str, Any]]:
        return self.get(DomainKey.HACKATHONS)

    @property
    def tasks(self) -> List[Dict[str, Any]]:
        return self.get(DomainKey.TASKS)


def format_offline_info(saved_at: Optional[datetime]) -> str:
    if saved_at is None:
        return OFFLINE_EMPTY_MESSAGE
    return OFFLINE_CACHED_TEMPLATE.format(saved_at=saved_at.isoformat())


class DataFetcher(BaseService):
    """
    Base class for a screen's fetch cycle.

    Subclasses declare the domains they show and implement `_query`.
    """

    domains: Tuple[DomainKey, ...] = ()

    def __init__(
        self,
        gateway: SupabaseGateway,
        cache_store: Optional[LocalCacheStore] = None,
    ):
        super().__init__()
        self.gateway = gateway
        self.cache_store = cache_store or get_local_cache_store()
        self.phase = FetchPhase.IDLE
        self.last_result: Optional[FetchResult] = None

    @abstractmethod
    def _query(self, team_ids: Sequence[str]) -> Dict[DomainKey, List[Dict[str, Any]]]:
        """Authoritative read of every domain of this screen."""

    def _empty(self) -> Dict[DomainKey, List[Dict[str, Any]]]:
        return {domain: [] for domain in self.domains}

    def _finish(self, result: FetchResult) -> FetchResult:
        self.phase = result.phase
        self.last_result = result
        return result

    def fetch(self) -> FetchResult:
        """Run one fetch cycle and return the state to render."""
        user = self.gateway.get_session_user()
        if user is None:
            return self._finish(FetchResult(phase=FetchPhase.SIGNED_OUT, collections=self._empty()))

        self.phase = FetchPhase.LOADING
        try:
            team_ids = self.gateway.get_team_ids(user["id"])
            if not team_ids:
                return self._finish(
                    FetchResult(phase=FetchPhase.NO_TEAM, user=user, collections=self._empty())
                )
            collections = self._query(team_ids)
        except Exception as e:
            self.logger.warning(f"Authoritative fetch failed, using offline cache: {e}")
            return self._finish(self._fallback(user))

        for domain, rows in collections.items():
            self.cache_store.write(user["id"], domain, rows)

        self.logger.debug(
            "Fetched " + ", ".join(f"{len(rows)} {domain.value}" for domain, rows in collections.items())
        )
        return self._finish(FetchResult(phase=FetchPhase.SUCCESS, user=user, collections=collections))

    def refresh(self) -> FetchResult:
        """Explicit user-triggered re-fetch."""
        return self.fetch()

    def _fallback(self, user: Dict[str, Any]) -> FetchResult:
        collections = self._empty()
        saved_at: Optional[datetime] = None

        for domain in self.domains:
            cached = self.cache_store.read(user["id"], domain)
            if not cached.is_hit:
                continue
            collections[domain] = list(cached.value or [])
            if saved_at is None:
                saved_at = cached.saved_at

        return FetchResult(
            phase=FetchPhase.FALLBACK,
            user=user,
            collections=collections,
            offline_info=format_offline_info(saved_at),
            saved_at=saved_at,
        )


class DashboardFetcher(DataFetcher):
    """Hackathons by submission deadline and tasks by deadline."""

    domains = (DomainKey.HACKATHONS, DomainKey.TASKS)

    def _query(self, team_ids):
        return {
            DomainKey.HACKATHONS: self.gateway.fetch_hackathons(team_ids),
            DomainKey.TASKS: self.gateway.fetch_tasks(team_ids, order_by="deadline"),
        }


class HackathonListFetcher(DataFetcher):
    domains = (DomainKey.HACKATHONS,)

    def _query(self, team_ids):
        return {DomainKey.HACKATHONS: self.gateway.fetch_hackathons(team_ids)}


class TaskListFetcher(DataFetcher):
    """Task board: newest tasks first."""

    domains = (DomainKey.TASKS,)

    def _query(self, team_ids):
        return {
            DomainKey.TASKS: self.gateway.fetch_tasks(team_ids, order_by="created_at", ascending=False)
        }
