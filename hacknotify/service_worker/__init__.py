# =============================================================================
# hacknotify/service_worker/__init__.py
# Offline request interception over a versioned response cache
# =============================================================================

from hacknotify.service_worker.policy import (
    Request,
    RequestPolicy,
    classify,
    classify_request,
    is_navigation_request,
    STATIC_ASSET_PREFIX,
)
from hacknotify.service_worker.messages import (
    precache_message,
    is_precache_message,
    PRECACHE_MESSAGE_TYPE,
)
from hacknotify.service_worker.network import HttpResponse, Network
from hacknotify.service_worker.cache_storage import Cache, CacheStorage
from hacknotify.service_worker.worker import (
    ServiceWorker,
    MessageChannel,
    WorkerState,
    CACHE_NAME,
    CORE_ASSETS,
    OFFLINE_URL,
)
from hacknotify.service_worker.registration import (
    register_service_worker,
    get_service_worker,
)

__all__ = [
    "Request",
    "RequestPolicy",
    "classify",
    "classify_request",
    "is_navigation_request",
    "STATIC_ASSET_PREFIX",
    "HttpResponse",
    "Network",
    "Cache",
    "CacheStorage",
    "ServiceWorker",
    "MessageChannel",
    "WorkerState",
    "precache_message",
    "is_precache_message",
    "CACHE_NAME",
    "CORE_ASSETS",
    "OFFLINE_URL",
    "PRECACHE_MESSAGE_TYPE",
    "register_service_worker",
    "get_service_worker",
]
