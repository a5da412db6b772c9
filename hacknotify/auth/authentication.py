# =============================================================================
# hacknotify/auth/authentication.py
# Sign-in / Sign-out through Supabase Auth
# =============================================================================
"""
Authentication for HackNotify.

Credentials are checked by Supabase Auth. The session it returns is kept
in memory by the browser session's client, so `current_user()` needs no
network for the rest of that Streamlit session.

A successful sign-in also kicks off the precache warm-up (once per
sign-in, in the background) so the user's pages open without a network.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Optional

import streamlit as st

from hacknotify.data.supabase_client import SupabaseGateway
from hacknotify.errors import AuthenticationError, handle_error
from hacknotify.offline.local_cache import LocalCacheStore
from hacknotify.offline.precache import PostMessage, PrecacheOrchestrator
from hacknotify.service_worker.registration import get_service_worker
from hacknotify.services.base_service import BaseService, ServiceResult

OrchestratorFactory = Callable[[SupabaseGateway, PostMessage], PrecacheOrchestrator]

# Keys this module owns in st.session_state
SESSION_KEYS = ("authenticated", "user")


class AuthService(BaseService):
    """
    Usage:
        auth = AuthService(get_gateway())
        result = auth.sign_in(email, password)
        if result:
            remember_user(result.data)
    """

    def __init__(
        self,
        gateway: SupabaseGateway,
        post_message: Optional[PostMessage] = None,
        orchestrator_factory: Optional[OrchestratorFactory] = None,
    ):
        super().__init__()
        self.gateway = gateway
        self.post_message = post_message
        self.orchestrator_factory = orchestrator_factory or PrecacheOrchestrator
        self.orchestrator: Optional[PrecacheOrchestrator] = None

    def _resolve_post_message(self) -> Optional[PostMessage]:
        if self.post_message is not None:
            return self.post_message
        worker = get_service_worker()
        return worker.post_message if worker is not None else None

    def _start_precache(self, user_id: str) -> None:
        post_message = self._resolve_post_message()
        if post_message is None:
            self.logger.debug("No service worker registered; skipping precache")
            return
        self.orchestrator = self.orchestrator_factory(self.gateway, post_message)
        self.orchestrator.start(user_id)

    def sign_in(self, email: str, password: str) -> ServiceResult:
        """
        Sign in with email and password.

        Returns:
            ServiceResult with the user dict, or the provider's error message
        """
        with self.log_operation(f"Sign-in for {email}"):
            try:
                user = self.gateway.sign_in(email, password)
            except AuthenticationError as e:
                handle_error(e, show_user_message=False)
                return ServiceResult.from_exception(e)

        self._start_precache(user["id"])
        return ServiceResult.ok(user)

    def current_user(self) -> Optional[Dict[str, Any]]:
        """User of the persisted session; no network needed."""
        return self.gateway.get_session_user()

    def sign_out(self, cache_store: Optional[LocalCacheStore] = None) -> ServiceResult:
        """
        End the session. When a cache store is given, the user's offline
        copies are removed too.
        """
        user = self.current_user()
        result = self.safe_execute("Sign-out", self.gateway.sign_out)
        if result and cache_store is not None and user is not None:
            cache_store.clear(user["id"])
        return result


# ==================== SESSION STATE HELPERS ====================

def remember_user(user: Dict[str, Any]) -> None:
    """Record the signed-in user for this Streamlit session."""
    st.session_state["authenticated"] = True
    st.session_state["user"] = user


def check_authentication() -> bool:
    """
    Check if the current Streamlit session has a signed-in user.

    Returns:
        bool: True if user is authenticated, False otherwise
    """
    return bool(st.session_state.get("authenticated", False))


def get_session_user() -> Optional[Dict[str, Any]]:
    if not check_authentication():
        return None
    return st.session_state.get("user")


def logout_user() -> None:
    """Clear authentication keys from the Streamlit session."""
    for key in SESSION_KEYS:
        if key in st.session_state:
            del st.session_state[key]


def require_authentication(auth: AuthService) -> Optional[Dict[str, Any]]:
    """
    Page guard. Restores the user from the persisted session when the
    Streamlit session is new; otherwise sends the visitor to the login page.
    """
    user = get_session_user()
    if user is not None:
        return user

    user = auth.current_user()
    if user is not None:
        remember_user(user)
        return user

    st.warning("Please sign in to continue.")
    if st.button("Go to sign-in"):
        st.switch_page("Welcome.py")
    st.stop()
    return None
