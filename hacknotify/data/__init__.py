# =============================================================================
# hacknotify/data/__init__.py
# =============================================================================

from .supabase_client import (
    SupabaseGateway,
    get_supabase_client,
    get_session_client,
    get_admin_client,
    get_gateway,
)

__all__ = [
    "SupabaseGateway",
    "get_supabase_client",
    "get_session_client",
    "get_admin_client",
    "get_gateway",
]
