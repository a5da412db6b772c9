# =============================================================================
# hacknotify/errors/exceptions.py
# Custom Exception Hierarchy for HackNotify
# =============================================================================

from typing import Optional, Dict, Any


class HackNotifyError(Exception):
    """
    Base exception for all HackNotify errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "BACKEND_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "HN_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# DATA LAYER EXCEPTIONS
# =============================================================================

class BackendError(HackNotifyError):
    """Raised when an authoritative read or write against the backend fails"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            code="BACKEND_001",
            details=details,
            **kwargs,
        )


class CacheStoreError(HackNotifyError):
    """Raised internally when the local cache storage cannot be used"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            code="CACHE_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# SERVICE WORKER EXCEPTIONS
# =============================================================================

class ServiceWorkerInstallError(HackNotifyError):
    """Raised when the shell manifest cannot be fully cached at install time"""

    def __init__(
        self,
        message: str,
        cache_name: Optional[str] = None,
        failed_url: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if cache_name:
            details["cache_name"] = cache_name
        if failed_url:
            details["failed_url"] = failed_url

        super().__init__(
            message=message,
            code="SW_001",
            details=details,
            recoverable=False,
            **kwargs,
        )


# =============================================================================
# AUTH & NOTIFICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(HackNotifyError):
    """Raised when sign-in or session lookup fails"""

    def __init__(self, message: str, email: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if email:
            details["email"] = email

        super().__init__(
            message=message,
            code="AUTH_001",
            details=details,
            **kwargs,
        )


class NotificationError(HackNotifyError):
    """Raised when an email cannot be delivered"""

    def __init__(
        self,
        message: str,
        recipient: Optional[str] = None,
        notification_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if recipient:
            details["recipient"] = recipient
        if notification_type:
            details["notification_type"] = notification_type

        super().__init__(
            message=message,
            code="NOTIFY_001",
            details=details,
            **kwargs,
        )


class CronAuthorizationError(HackNotifyError):
    """Raised when a scheduled-job trigger carries a missing or wrong bearer token"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", **kwargs):
        super().__init__(
            message=message,
            code="CRON_401",
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(HackNotifyError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
