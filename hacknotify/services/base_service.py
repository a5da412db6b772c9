# =============================================================================
# hacknotify/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
from abc import ABC
from typing import Optional, Dict, Any, Callable
from dataclasses import dataclass

from hacknotify.logging import get_logger, LogContext
from hacknotify.errors import handle_error, HackNotifyError


@dataclass
class ServiceResult:
    """
    Standard result container for service operations.

    Provides consistent structure for all service method returns.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Dict[str, Any] = None
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata,
        )

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, HackNotifyError):
            return cls(
                success=False,
                error=e.message,
                error_code=e.code,
                metadata=e.details,
            )
        return cls(
            success=False,
            error=str(e),
            error_code="EXCEPTION",
        )


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging
    - Error handling
    - Result standardization

    Usage:
        class MyService(BaseService):
            def do_something(self) -> ServiceResult:
                with self.log_operation("Doing something"):
                    result = ...
                    return ServiceResult.ok(result)
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Sending daily summaries"):
                job.run()
        """
        return LogContext(self.logger, operation)

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """
        Execute a function with error handling and logging.

        Returns:
            ServiceResult with success/failure status
        """
        with self.log_operation(operation):
            try:
                result = func(*args, **kwargs)
                return ServiceResult.ok(result)
            except HackNotifyError as e:
                handle_error(e, show_user_message=False)
                return ServiceResult.from_exception(e)
            except Exception as e:
                self.logger.error(f"{operation} failed: {e}", exc_info=True)
                return ServiceResult.fail(str(e))
