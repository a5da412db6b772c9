"""
Sidebar helpers shared by every page: signed-in user, connectivity badge
and the sign-out button.
"""

from typing import Optional

import streamlit as st

from hacknotify.auth.authentication import AuthService, get_session_user, logout_user
from hacknotify.offline.connection_manager import ConnectivitySignal
from hacknotify.offline.local_cache import LocalCacheStore, get_local_cache_store


def connectivity_badge(signal: ConnectivitySignal) -> str:
    return "🟢 Online" if signal.is_online else "🔴 Offline (read-only)"


def add_logout_button(auth: AuthService, cache_store: Optional[LocalCacheStore] = None):
    """
    Add a sign-out button to the sidebar. Signing out also drops the
    user's offline copies when a cache store is given.
    """
    if st.sidebar.button("Sign out", use_container_width=True):
        result = auth.sign_out(cache_store=cache_store)
        if not result:
            st.sidebar.error(f"Sign-out failed: {result.error}")
            return
        logout_user()
        st.switch_page("Welcome.py")


def initialize_navigation(auth: AuthService, signal: ConnectivitySignal):
    """
    Render the sidebar block.
    Call this at the start of every page.
    """
    user = get_session_user()
    if user:
        st.sidebar.markdown(f"**{user.get('name') or user.get('email')}**")
    st.sidebar.caption(connectivity_badge(signal))
    add_logout_button(auth, cache_store=get_local_cache_store())
