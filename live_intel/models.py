"""
Live Intel - Data Models.

============================================================
CORE DATA STRUCTURES
============================================================

- IntelCategory / SourceStatus / AdvisoryLevel / OrchestratorState
- SourceDescriptor: Static description of a registered source
- Advisory / IntelPayload: What a collector produces
- Snapshot: One source's timestamped collection result
- HealthRecord: Per-source health bookkeeping
- CacheEntry: Snapshot plus absolute expiry
- Alert: Entry of the rolling advisory feed
- CollectionOutcome: Result of one Collector Runner call
- RunSummary: Result of one orchestrator run
- IntelView / DispatchAdjustments / TreasuryInsights: Read side

============================================================
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================
# ENUMS
# =============================================================


class IntelCategory(str, Enum):
    """Category of an intelligence source."""
    MARKET = "MARKET"
    OPERATIONAL = "OPERATIONAL"
    COMPLIANCE = "COMPLIANCE"
    PARTNER = "PARTNER"


class SourceStatus(str, Enum):
    """
    Health status of a source.

    - HEALTHY: Last collection succeeded
    - DEGRADED: Last collection failed, stale data may be served
    """
    HEALTHY = "HEALTHY"
    DEGRADED = "DEGRADED"


class AdvisoryLevel(str, Enum):
    """Severity of an advisory / alert."""
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"

    @classmethod
    def parse(cls, value: Any) -> "AdvisoryLevel":
        """Coerce a raw level, defaulting to INFO."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.INFO


class OrchestratorState(str, Enum):
    """Single-flight state of the orchestrator."""
    IDLE = "IDLE"
    RUNNING = "RUNNING"


# =============================================================
# SOURCES AND COLLECTION RESULTS
# =============================================================


@dataclass(frozen=True)
class SourceDescriptor:
    """
    Immutable description of an intelligence source.

    ttl_seconds overrides the configured cache TTL for this source.
    """
    source_id: str
    name: str
    category: IntelCategory
    provider: str = "DYNASTY_INTEL"
    ttl_seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_id": self.source_id,
            "name": self.name,
            "category": self.category.value,
            "provider": self.provider,
            "ttl_seconds": self.ttl_seconds,
        }


@dataclass(frozen=True)
class Advisory:
    """A warning/info message emitted by a collector."""
    level: AdvisoryLevel
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", AdvisoryLevel.parse(self.level))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "message": self.message,
            **self.details,
        }


@dataclass
class IntelPayload:
    """Raw output of a collector: metrics plus advisories."""
    metrics: Dict[str, Any]
    advisories: List[Advisory] = field(default_factory=list)


@dataclass(frozen=True)
class Snapshot:
    """One source's timestamped collection result."""
    source_id: str
    category: IntelCategory
    obtained_at: datetime
    metrics: Dict[str, Any]
    advisories: List[Advisory] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_id": self.source_id,
            "category": self.category.value,
            "obtained_at": self.obtained_at.isoformat(),
            "metrics": self.metrics,
            "advisories": [a.to_dict() for a in self.advisories],
        }


@dataclass
class HealthRecord:
    """
    Health bookkeeping for a single source.

    failure_count only grows on failure and only resets on success.
    """
    source_id: str
    status: SourceStatus
    last_success: Optional[datetime] = None
    last_error: Optional[str] = None
    last_attempt: Optional[datetime] = None
    failure_count: int = 0
    last_duration_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_id": self.source_id,
            "status": self.status.value,
            "last_success": self.last_success.isoformat() if self.last_success else None,
            "last_error": self.last_error,
            "last_attempt": self.last_attempt.isoformat() if self.last_attempt else None,
            "failure_count": self.failure_count,
            "last_duration_ms": round(self.last_duration_ms, 2) if self.last_duration_ms is not None else None,
        }


@dataclass(frozen=True)
class CacheEntry:
    """A cached Snapshot with its absolute expiry instant."""
    snapshot: Snapshot
    expires_at: datetime

    def is_fresh(self, now: datetime) -> bool:
        """Fresh iff now < expires_at."""
        return now < self.expires_at


@dataclass(frozen=True)
class Alert:
    """An advisory promoted into the rolling alert feed."""
    alert_id: str
    source_id: str
    category: IntelCategory
    severity: AdvisoryLevel
    message: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alert_id": self.alert_id,
            "source_id": self.source_id,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }


@dataclass
class CollectionOutcome:
    """
    Result of running one source's collector.

    On failure, snapshot holds the stale-served cached Snapshot
    (if any) and stale is True.
    """
    source_id: str
    success: bool
    snapshot: Optional[Snapshot] = None
    stale: bool = False
    error: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def available(self) -> bool:
        """Whether any snapshot (fresh or stale) was returned."""
        return self.snapshot is not None


@dataclass
class RunSummary:
    """Summary of one orchestrator run."""
    run_number: int
    started_at: datetime
    duration_ms: float = 0.0
    succeeded_sources: List[str] = field(default_factory=list)
    failed_sources: List[str] = field(default_factory=list)
    stale_sources: List[str] = field(default_factory=list)
    alerts_generated: int = 0

    @property
    def succeeded(self) -> int:
        return len(self.succeeded_sources)

    @property
    def failed(self) -> int:
        return len(self.failed_sources)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_number": self.run_number,
            "started_at": self.started_at.isoformat(),
            "duration_ms": round(self.duration_ms, 2),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "stale_served": len(self.stale_sources),
            "alerts_generated": self.alerts_generated,
            "failed_sources": list(self.failed_sources),
        }


# =============================================================
# READ SIDE
# =============================================================


@dataclass(frozen=True)
class IntelView:
    """
    A cached Snapshot as seen by readers.

    from_cache is True once the entry is past its TTL;
    cache_age is whole seconds since the snapshot was obtained.
    """
    snapshot: Snapshot
    from_cache: bool
    cache_age: int

    @property
    def source_id(self) -> str:
        return self.snapshot.source_id

    @property
    def category(self) -> IntelCategory:
        return self.snapshot.category

    @property
    def metrics(self) -> Dict[str, Any]:
        return self.snapshot.metrics

    def to_dict(self) -> Dict[str, Any]:
        data = self.snapshot.to_dict()
        data["from_cache"] = self.from_cache
        data["cache_age"] = self.cache_age
        return data


@dataclass
class DispatchAdjustments:
    """Pricing/dispatch adjustments derived from cached intel."""
    rate_multiplier: float = 1.0
    delay_factor: float = 0.0
    risk_score: float = 0.0
    advisories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rate_multiplier": round(self.rate_multiplier, 4),
            "delay_factor": self.delay_factor,
            "risk_score": self.risk_score,
            "advisories": list(self.advisories),
        }


@dataclass
class TreasuryInsights:
    """Coarse market outlook for treasury views."""
    fuel_cost_trend: str = "STABLE"
    rate_environment: str = "NORMAL"
    demand_outlook: str = "MODERATE"
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fuel_cost_trend": self.fuel_cost_trend,
            "rate_environment": self.rate_environment,
            "demand_outlook": self.demand_outlook,
            "recommendations": list(self.recommendations),
        }


@dataclass
class OrchestratorStatus:
    """Point-in-time status of an orchestrator."""
    running: bool
    state: OrchestratorState
    last_run_at: Optional[datetime]
    run_count: int
    last_summary: Optional[RunSummary]
    source_health: Dict[str, HealthRecord]
    cache_status: Dict[str, Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "state": self.state.value,
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
            "run_count": self.run_count,
            "last_summary": self.last_summary.to_dict() if self.last_summary else None,
            "source_health": {k: v.to_dict() for k, v in self.source_health.items()},
            "cache_status": self.cache_status,
        }
