"""
Authentication module for HackNotify.

Sign-in goes through Supabase Auth; a successful sign-in starts the
background precache of the user's pages.
"""

from .authentication import (
    AuthService,
    remember_user,
    check_authentication,
    get_session_user,
    logout_user,
    require_authentication,
)
from .navigation import (
    add_logout_button,
    connectivity_badge,
    initialize_navigation,
)

__all__ = [
    "AuthService",
    "remember_user",
    "check_authentication",
    "get_session_user",
    "logout_user",
    "require_authentication",
    "add_logout_button",
    "connectivity_badge",
    "initialize_navigation",
]
