# =============================================================================
# hacknotify/config/settings.py
# Application Settings (Streamlit secrets with environment fallback)
# =============================================================================
"""
Settings are resolved in this order:

1. `.streamlit/secrets.toml` (via st.secrets), e.g.

    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"
    service_role_key = "your-service-role-key"

    [app]
    base_url = "https://hacknotify.example.com"

    [email]
    resend_api_key = "re_..."
    from_email = "HackNotify <notifications@hacknotify.com>"

    [cron]
    secret = "..."

2. Environment variables (a local `.env` file is loaded with python-dotenv).
3. Built-in defaults.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
import logging

from dotenv import load_dotenv

from hacknotify.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent.parent / "local_data" / "hacknotify.db"
DEFAULT_FROM_EMAIL = "HackNotify <notifications@hacknotify.com>"


def _secret(section: str, key: str) -> Optional[Any]:
    """Read a value from Streamlit secrets, or None when unavailable."""
    try:
        import streamlit as st
        if section in st.secrets and key in st.secrets[section]:
            return st.secrets[section][key]
    except Exception as e:
        # No secrets.toml outside a configured Streamlit deployment
        logger.debug(f"Streamlit secrets unavailable for {section}.{key}: {e}")
    return None


def _lookup(section: str, key: str, env_var: str, default: Any = None) -> Any:
    value = _secret(section, key)
    if value is None:
        value = os.getenv(env_var)
    return default if value in (None, "") else value


@dataclass
class Settings:
    """Resolved configuration for a HackNotify process."""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    base_url: str = "http://localhost:8501"
    db_path: Path = DEFAULT_DB_PATH
    resend_api_key: Optional[str] = None
    from_email: str = DEFAULT_FROM_EMAIL
    cron_secret: Optional[str] = None
    request_timeout: int = 10

    @classmethod
    def load(cls) -> Settings:
        """Build settings from secrets, environment and defaults."""
        load_dotenv()
        return cls(
            supabase_url=_lookup("supabase", "url", "SUPABASE_URL"),
            supabase_key=_lookup("supabase", "key", "SUPABASE_KEY"),
            supabase_service_role_key=_lookup(
                "supabase", "service_role_key", "SUPABASE_SERVICE_ROLE_KEY"
            ),
            base_url=_lookup("app", "base_url", "HACKNOTIFY_BASE_URL", cls.base_url),
            db_path=Path(_lookup("app", "db_path", "HACKNOTIFY_DB_PATH", DEFAULT_DB_PATH)),
            resend_api_key=_lookup("email", "resend_api_key", "RESEND_API_KEY"),
            from_email=_lookup("email", "from_email", "FROM_EMAIL", DEFAULT_FROM_EMAIL),
            cron_secret=_lookup("cron", "secret", "CRON_SECRET"),
            request_timeout=int(_lookup("app", "request_timeout", "HACKNOTIFY_REQUEST_TIMEOUT", 10)),
        )

    def require(self, name: str) -> Any:
        """
        Return a setting that must be present.

        Raises:
            ConfigurationError: if the setting is empty
        """
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"Missing required setting '{name}'", config_key=name)
        return value


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings() -> None:
    """Forget cached settings (tests, config reload)."""
    global _settings
    _settings = None
