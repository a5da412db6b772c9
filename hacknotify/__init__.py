# =============================================================================
# hacknotify/__init__.py
# HackNotify - Offline-aware hackathon & team task tracker
# =============================================================================
"""
HackNotify core package.

Subpackages:
    offline         Local cache store, connectivity signal, data fetchers, precache
    service_worker  Request interception policy over a versioned response cache
    data            Supabase gateway (authenticated queries, admin client)
    analytics       Derived views over fetched collections
    auth            Sign-in and session handling
    notifications   Scheduled reminder and summary jobs
"""

__version__ = "0.1.0"
