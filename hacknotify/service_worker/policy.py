# =============================================================================
# hacknotify/service_worker/policy.py
# Request classification for the offline request interceptor
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional
from urllib.parse import urlparse

from requests.structures import CaseInsensitiveDict

# Streamlit's frontend build output (content-hashed file names)
STATIC_ASSET_PREFIX = "/static/"


class RequestPolicy(Enum):
    """How an intercepted request is resolved."""
    PASSTHROUGH = "passthrough"     # not intercepted (non-GET)
    STATIC_ASSET = "static_asset"   # cache-first, immutable build output
    NAVIGATION = "navigation"       # stale-while-revalidate, offline page fallback
    DEFAULT = "default"             # cache-first with network write-through


@dataclass
class Request:
    """An outgoing request from the application shell."""
    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    mode: str = "cors"

    def __post_init__(self):
        self.method = self.method.upper()
        self.headers = CaseInsensitiveDict(self.headers or {})

    @classmethod
    def navigate(cls, url: str) -> Request:
        return cls(url=url, mode="navigate", headers={"Accept": "text/html"})


def is_navigation_request(
    method: str,
    headers: Optional[Mapping[str, str]] = None,
    mode: Optional[str] = None,
) -> bool:
    if mode == "navigate":
        return True
    accept = CaseInsensitiveDict(headers or {}).get("accept") or ""
    return method.upper() == "GET" and "text/html" in accept


def classify_request(
    method: str,
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    mode: Optional[str] = None,
) -> RequestPolicy:
    """
    Pick the caching policy for a request. First match wins:

    1. non-GET                          -> PASSTHROUGH
    2. path under the static prefix     -> STATIC_ASSET
    3. navigation or HTML-accepting GET -> NAVIGATION
    4. anything else                    -> DEFAULT
    """
    if method.upper() != "GET":
        return RequestPolicy.PASSTHROUGH
    if urlparse(url).path.startswith(STATIC_ASSET_PREFIX):
        return RequestPolicy.STATIC_ASSET
    if is_navigation_request(method, headers, mode):
        return RequestPolicy.NAVIGATION
    return RequestPolicy.DEFAULT


def classify(request: Request) -> RequestPolicy:
    return classify_request(request.method, request.url, request.headers, request.mode)
