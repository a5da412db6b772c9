# =============================================================================
# hacknotify/offline/__init__.py
# Offline-First Data Layer for HackNotify
# =============================================================================
"""
Offline-First Data Layer

Screens always ask the backend first. When that read fails, they show the
last copy that was successfully read, labelled with when it was saved.

Architecture:
------------
    Screen ──► DataFetcher ──► SupabaseGateway   (authoritative read)
                   │
                   ├── success ──► LocalCacheStore.write   (write-through)
                   └── failure ──► LocalCacheStore.read    (fallback)

    ConnectivitySignal ◄── ConnectionMonitor     (gates mutations only)

    AuthService.sign_in ──► PrecacheOrchestrator ──► ServiceWorker messages

Usage:
------
from hacknotify.offline import DashboardFetcher, get_connectivity_signal

result = DashboardFetcher(get_gateway()).fetch()
if result.offline_info:
    st.warning(result.offline_info)
"""

from hacknotify.offline.local_database import (
    LocalDatabase,
    get_local_database,
)

from hacknotify.offline.local_cache import (
    LocalCacheStore,
    get_local_cache_store,
    CacheEntry,
    CacheResult,
    CacheStatus,
    DomainKey,
    cache_key,
)

from hacknotify.offline.connection_manager import (
    ConnectivitySignal,
    ConnectionMonitor,
    ConnectionState,
    get_connectivity_signal,
    get_connection_monitor,
    can_mutate,
)

from hacknotify.offline.data_fetcher import (
    DataFetcher,
    DashboardFetcher,
    HackathonListFetcher,
    TaskListFetcher,
    FetchPhase,
    FetchResult,
    format_offline_info,
)

from hacknotify.offline.precache import (
    PrecacheOrchestrator,
    CORE_ROUTES,
    detail_url,
)

__all__ = [
    # Local Database
    "LocalDatabase",
    "get_local_database",
    # Local Cache
    "LocalCacheStore",
    "get_local_cache_store",
    "CacheEntry",
    "CacheResult",
    "CacheStatus",
    "DomainKey",
    "cache_key",
    # Connectivity
    "ConnectivitySignal",
    "ConnectionMonitor",
    "ConnectionState",
    "get_connectivity_signal",
    "get_connection_monitor",
    "can_mutate",
    # Fetchers
    "DataFetcher",
    "DashboardFetcher",
    "HackathonListFetcher",
    "TaskListFetcher",
    "FetchPhase",
    "FetchResult",
    "format_offline_info",
    # Precache
    "PrecacheOrchestrator",
    "CORE_ROUTES",
    "detail_url",
]
