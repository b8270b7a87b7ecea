"""
Live Intel - Configuration.

============================================================
CONFIGURABLE ORCHESTRATION
============================================================

All tunables of the orchestrator:
- Run interval
- Cache TTL
- Alert TTL and feed size
- Collector timeout
- Audit log / persistence endpoints

Configuration can be loaded from:
- Default values
- Environment variables (a .env file is honoured)

============================================================
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv


@dataclass
class LiveIntelConfig:
    """Configuration for the live intel orchestrator."""

    # Scheduling
    run_interval_seconds: float = 60.0
    """Orchestrator tick interval."""

    collector_timeout_seconds: Optional[float] = 30.0
    """Upper bound for a single collection call (None disables)."""

    # Cache
    cache_ttl_seconds: float = 60.0
    """Default TTL of a cached snapshot."""

    # Alerts
    alert_ttl_seconds: float = 3600.0
    """Lifetime of an alert in the feed."""

    max_alerts: int = 100
    """Maximum number of alerts retained."""

    default_alert_limit: int = 50
    """Default page size of get_active_alerts()."""

    # Collaborators
    codex_url: str = "http://localhost:3001"
    """Base URL of the audit log (codex) service."""

    audit_actor: str = "live-intel"
    """Actor recorded on audit events."""

    audit_timeout_seconds: float = 10.0
    """HTTP timeout for audit writes."""

    database_url: Optional[str] = None
    """SQLAlchemy URL for snapshot persistence (None disables)."""

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LiveIntelConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - LIVE_INTEL_RUN_INTERVAL_SECONDS
        - LIVE_INTEL_COLLECTOR_TIMEOUT_SECONDS ("none" disables)
        - LIVE_INTEL_CACHE_TTL_SECONDS
        - LIVE_INTEL_ALERT_TTL_SECONDS
        - LIVE_INTEL_MAX_ALERTS
        - LIVE_INTEL_DEFAULT_ALERT_LIMIT
        - CODEX_URL
        - LIVE_INTEL_AUDIT_ACTOR
        - LIVE_INTEL_DATABASE_URL / DATABASE_URL
        - LOG_LEVEL
        """
        load_dotenv()
        defaults = cls()

        timeout_raw = os.getenv("LIVE_INTEL_COLLECTOR_TIMEOUT_SECONDS")
        if timeout_raw is None or timeout_raw == "":
            collector_timeout = defaults.collector_timeout_seconds
        elif timeout_raw.lower() == "none":
            collector_timeout = None
        else:
            collector_timeout = float(timeout_raw)

        return cls(
            run_interval_seconds=float(os.getenv("LIVE_INTEL_RUN_INTERVAL_SECONDS", defaults.run_interval_seconds)),
            collector_timeout_seconds=collector_timeout,
            cache_ttl_seconds=float(os.getenv("LIVE_INTEL_CACHE_TTL_SECONDS", defaults.cache_ttl_seconds)),
            alert_ttl_seconds=float(os.getenv("LIVE_INTEL_ALERT_TTL_SECONDS", defaults.alert_ttl_seconds)),
            max_alerts=int(os.getenv("LIVE_INTEL_MAX_ALERTS", defaults.max_alerts)),
            default_alert_limit=int(os.getenv("LIVE_INTEL_DEFAULT_ALERT_LIMIT", defaults.default_alert_limit)),
            codex_url=os.getenv("CODEX_URL", defaults.codex_url),
            audit_actor=os.getenv("LIVE_INTEL_AUDIT_ACTOR", defaults.audit_actor),
            audit_timeout_seconds=float(os.getenv("LIVE_INTEL_AUDIT_TIMEOUT_SECONDS", defaults.audit_timeout_seconds)),
            database_url=os.getenv("LIVE_INTEL_DATABASE_URL") or os.getenv("DATABASE_URL"),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.run_interval_seconds <= 0:
            errors.append("run_interval_seconds must be positive")

        if self.collector_timeout_seconds is not None and self.collector_timeout_seconds <= 0:
            errors.append("collector_timeout_seconds must be positive or None")

        if self.cache_ttl_seconds <= 0:
            errors.append("cache_ttl_seconds must be positive")

        if self.alert_ttl_seconds <= 0:
            errors.append("alert_ttl_seconds must be positive")

        if self.max_alerts < 1:
            errors.append("max_alerts must be at least 1")

        if self.default_alert_limit < 1:
            errors.append("default_alert_limit must be at least 1")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (database URL is redacted)."""
        return {
            "run_interval_seconds": self.run_interval_seconds,
            "collector_timeout_seconds": self.collector_timeout_seconds,
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "alert_ttl_seconds": self.alert_ttl_seconds,
            "max_alerts": self.max_alerts,
            "default_alert_limit": self.default_alert_limit,
            "codex_url": self.codex_url,
            "database_url": self.database_url.split("@")[-1] if self.database_url else None,
            "log_level": self.log_level,
        }
