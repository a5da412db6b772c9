# =============================================================================
# hacknotify/service_worker/network.py
# HTTP access for the request interceptor
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional
from urllib.parse import urljoin

import requests


@dataclass
class HttpResponse:
    """Full response snapshot: what the response cache stores and returns."""
    url: str
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    stored_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def from_requests(cls, response: requests.Response, url: Optional[str] = None) -> HttpResponse:
        return cls(
            url=url or response.url,
            status=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    def stamped(self) -> HttpResponse:
        """Copy with stored_at set to now."""
        return HttpResponse(
            url=self.url,
            status=self.status,
            headers=dict(self.headers),
            body=self.body,
            stored_at=datetime.now(timezone.utc),
        )


class Network:
    """
    Same-origin HTTP client. The session keeps the signed-in user's cookies,
    so every fetch goes out with credentials.

    Raises ConnectionError when the request does not complete (DNS, refused,
    timeout). HTTP error statuses are returned, not raised.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: int = 10,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.timeout = timeout

    def resolve(self, url: str) -> str:
        """Absolute URL for a path relative to the application origin."""
        return urljoin(self.base_url, url)

    def fetch(self, url: str, headers: Optional[Mapping[str, str]] = None) -> HttpResponse:
        absolute = self.resolve(url)
        try:
            response = self.session.get(absolute, headers=dict(headers or {}), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ConnectionError(f"Request failed for {absolute}: {e}") from e
        return HttpResponse.from_requests(response, url=absolute)

    def send(self, method: str, url: str, **kwargs) -> requests.Response:
        """Un-intercepted request (anything that is not a GET)."""
        kwargs.setdefault("timeout", self.timeout)
        return self.session.request(method, self.resolve(url), **kwargs)
