# =============================================================================
# hacknotify/errors/__init__.py
# Centralized Error Handling for HackNotify
# =============================================================================

from .exceptions import (
    HackNotifyError,
    BackendError,
    CacheStoreError,
    ServiceWorkerInstallError,
    AuthenticationError,
    NotificationError,
    CronAuthorizationError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    ErrorContext,
    error_boundary,
)

__all__ = [
    # Exceptions
    "HackNotifyError",
    "BackendError",
    "CacheStoreError",
    "ServiceWorkerInstallError",
    "AuthenticationError",
    "NotificationError",
    "CronAuthorizationError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "ErrorContext",
    "error_boundary",
]
