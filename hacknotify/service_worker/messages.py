# =============================================================================
# hacknotify/service_worker/messages.py
# Application -> worker message protocol
# =============================================================================

from typing import Any, Dict, Sequence

PRECACHE_MESSAGE_TYPE = "PRECACHE_URLS"


def precache_message(urls: Sequence[str]) -> Dict[str, Any]:
    """Build a PRECACHE_URLS command: {"type": "PRECACHE_URLS", "urls": [...]}."""
    return {"type": PRECACHE_MESSAGE_TYPE, "urls": list(urls)}


def is_precache_message(message: Any) -> bool:
    return (
        isinstance(message, dict)
        and message.get("type") == PRECACHE_MESSAGE_TYPE
        and isinstance(message.get("urls"), list)
    )
