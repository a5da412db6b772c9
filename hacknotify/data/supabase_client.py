# =============================================================================
# hacknotify/data/supabase_client.py
# Supabase Client Configuration and Authenticated Queries for HackNotify
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence
import logging

import streamlit as st
from supabase import Client, create_client

from hacknotify.config import get_settings
from hacknotify.errors import AuthenticationError, BackendError

logger = logging.getLogger(__name__)

TASK_SELECT = "*, assignee:assigned_to(id, name, email)"


def get_supabase_client() -> Optional[Client]:
    """
    Initialize a Supabase client with the anon key.

    Expects secrets in .streamlit/secrets.toml (or SUPABASE_URL / SUPABASE_KEY):
        [supabase]
        url = "https://your-project.supabase.co"
        key = "your-anon-key"

    Returns:
        Supabase client instance or None if not configured
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not found; backend reads will fail over to cache")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        return None


# st.session_state key of this browser session's client
SESSION_CLIENT_KEY = "supabase_client"


def get_session_client() -> Optional[Client]:
    """
    Supabase client of the current browser session.

    The client holds the signed-in user's auth session, so each Streamlit
    session gets its own and it is never shared through st.cache_resource.
    """
    if SESSION_CLIENT_KEY not in st.session_state:
        st.session_state[SESSION_CLIENT_KEY] = get_supabase_client()
    return st.session_state[SESSION_CLIENT_KEY]


def get_admin_client() -> Client:
    """
    Supabase client with the service-role key (bypasses RLS).

    Only scheduled jobs use this client.
    """
    settings = get_settings()
    return create_client(
        settings.require("supabase_url"),
        settings.require("supabase_service_role_key"),
    )


class SupabaseGateway:
    """
    Authenticated query interface used by fetchers, auth and precache.

    Every backend failure surfaces as BackendError (or AuthenticationError
    for sign-in), whatever the underlying transport raised.
    """

    def __init__(self, client: Optional[Client]):
        self.client = client

    def is_connected(self) -> bool:
        """Check if a Supabase client is available."""
        return self.client is not None

    def _require_client(self, table: str, operation: str) -> Client:
        if self.client is None:
            raise BackendError("Supabase client not configured", table=table, operation=operation)
        return self.client

    # =========================================================================
    # AUTH
    # =========================================================================

    @staticmethod
    def _user_to_dict(user: Any) -> Dict[str, Any]:
        metadata = getattr(user, "user_metadata", None) or {}
        return {
            "id": user.id,
            "email": getattr(user, "email", None),
            "name": metadata.get("name"),
        }

    def get_session_user(self) -> Optional[Dict[str, Any]]:
        """
        User of the session held by this client, or None.

        Reads the stored session only (no request), so it works offline.
        """
        if self.client is None:
            return None
        try:
            session = self.client.auth.get_session()
        except Exception as e:
            logger.warning(f"Could not read local session: {e}")
            return None
        if session is None or session.user is None:
            return None
        return self._user_to_dict(session.user)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Sign in with email and password; returns the user."""
        if self.client is None:
            raise AuthenticationError("Supabase client not configured", email=email)
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            raise AuthenticationError(str(e), email=email) from e

        if response.user is None:
            raise AuthenticationError("Sign-in returned no user", email=email)
        return self._user_to_dict(response.user)

    def sign_out(self) -> None:
        if self.client is not None:
            self.client.auth.sign_out()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_team_ids(self, user_id: str) -> List[str]:
        """Ids of the teams the user belongs to."""
        client = self._require_client("team_members", "select")
        try:
            response = (
                client.table("team_members")
                .select("team_id")
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise BackendError(str(e), table="team_members", operation="select") from e
        return [row["team_id"] for row in response.data or [] if row.get("team_id")]

    def fetch_collection(
        self,
        table: str,
        team_ids: Sequence[str],
        order_by: str,
        ascending: bool = True,
        columns: str = "*",
    ) -> List[Dict[str, Any]]:
        """All rows of a team-scoped table, ordered by one column."""
        client = self._require_client(table, "select")
        try:
            response = (
                client.table(table)
                .select(columns)
                .in_("team_id", list(team_ids))
                .order(order_by, desc=not ascending)
                .execute()
            )
        except Exception as e:
            raise BackendError(str(e), table=table, operation="select") from e
        return list(response.data or [])

    def fetch_hackathons(self, team_ids: Sequence[str]) -> List[Dict[str, Any]]:
        return self.fetch_collection("hackathons", team_ids, order_by="submission_deadline")

    def fetch_tasks(
        self,
        team_ids: Sequence[str],
        order_by: str = "deadline",
        ascending: bool = True,
    ) -> List[Dict[str, Any]]:
        return self.fetch_collection(
            "tasks", team_ids, order_by=order_by, ascending=ascending, columns=TASK_SELECT
        )

    def fetch_id_page(
        self,
        table: str,
        team_ids: Sequence[str],
        start: int,
        end: int,
    ) -> List[str]:
        """One page of row ids, rows start..end inclusive, in id order."""
        client = self._require_client(table, "select")
        try:
            response = (
                client.table(table)
                .select("id")
                .in_("team_id", list(team_ids))
                .order("id")
                .range(start, end)
                .execute()
            )
        except Exception as e:
            raise BackendError(str(e), table=table, operation="select") from e
        return [row["id"] for row in response.data or [] if row.get("id")]

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> None:
        """Write the given columns of one task."""
        client = self._require_client("tasks", "update")
        try:
            client.table("tasks").update(fields).eq("id", task_id).execute()
        except Exception as e:
            raise BackendError(str(e), table="tasks", operation="update") from e


def get_gateway() -> SupabaseGateway:
    """Gateway over the current browser session's Supabase client."""
    return SupabaseGateway(get_session_client())
