"""
Live Intel - Exceptions.

============================================================
CUSTOM EXCEPTIONS
============================================================

- LiveIntelError: Base exception
- CollectionError: A collector raised, timed out or returned invalid data
- PersistenceError: Best-effort snapshot write failed
- AuditLogError: Best-effort audit write failed
- UnknownSourceError: Lookup of an unregistered source
- ConfigurationError: Invalid configuration or registry misuse

============================================================
FAILURE ISOLATION
============================================================

- CollectionError never leaves the Collector Runner
- PersistenceError / AuditLogError are logged, never surfaced
- Read API calls never fail because a source is degraded

============================================================
"""

from typing import Any, Dict, List, Optional


class LiveIntelError(Exception):
    """
    Base exception for live intel errors.

    All live intel exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        source_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Error message
            source_id: Id of the affected source
            details: Additional error details
        """
        self.message = message
        self.source_id = source_id
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.source_id:
            return f"[{self.source_id}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "source_id": self.source_id,
            "details": self.details,
        }


class CollectionError(LiveIntelError):
    """
    Raised when a source's collection routine fails.

    Absorbed at the Collector Runner boundary.
    """

    def __init__(
        self,
        source_id: str,
        reason: str,
        original_exception: Optional[BaseException] = None,
    ) -> None:
        details: Dict[str, Any] = {"reason": reason}
        if original_exception is not None:
            details["original_exception"] = str(original_exception)
            details["exception_type"] = type(original_exception).__name__

        super().__init__(
            message=f"Collection failed: {reason}",
            source_id=source_id,
            details=details,
        )
        self.reason = reason
        self.original_exception = original_exception


class PersistenceError(LiveIntelError):
    """Raised when a snapshot cannot be persisted. Best-effort only."""

    def __init__(
        self,
        reason: str,
        source_id: Optional[str] = None,
        original_exception: Optional[BaseException] = None,
    ) -> None:
        details: Dict[str, Any] = {"reason": reason}
        if original_exception is not None:
            details["original_exception"] = str(original_exception)

        super().__init__(
            message=f"Failed to persist snapshot: {reason}",
            source_id=source_id,
            details=details,
        )


class AuditLogError(LiveIntelError):
    """Raised when an audit event cannot be written. Best-effort only."""

    def __init__(
        self,
        event_type: str,
        reason: str,
        original_exception: Optional[BaseException] = None,
    ) -> None:
        details: Dict[str, Any] = {"event_type": event_type, "reason": reason}
        if original_exception is not None:
            details["original_exception"] = str(original_exception)

        super().__init__(
            message=f"Failed to log {event_type} event: {reason}",
            details=details,
        )
        self.event_type = event_type


class UnknownSourceError(LiveIntelError):
    """Raised on lookup of an unregistered source."""

    def __init__(
        self,
        source_id: str,
        available_sources: Optional[List[str]] = None,
    ) -> None:
        message = f"Unknown source: {source_id}"
        details: Dict[str, Any] = {}
        if available_sources:
            details["available_sources"] = available_sources
            message += f". Available: {', '.join(available_sources)}"

        super().__init__(
            message=message,
            source_id=source_id,
            details=details,
        )


class ConfigurationError(LiveIntelError):
    """
    Raised when configuration is invalid.

    Should be caught at startup.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
    ) -> None:
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message=message, details=details)
