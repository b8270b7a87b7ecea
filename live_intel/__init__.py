"""
Live Intel Orchestration Module.

============================================================
REAL-TIME LOGISTICS INTELLIGENCE
============================================================

Periodically polls a fixed set of intelligence sources
(freight rates, fuel prices, weather, traffic, port and
airport status, regulatory updates, partner load boards,
demand signals) and keeps the latest result of each in
a TTL cache that downstream pricing and dispatch read.

CORE PHILOSOPHY:
- One failing source never fails a run
- A failed collection never overwrites the last good result
- Readers always get the last known state, flagged when stale

============================================================
USAGE
============================================================

```python
from live_intel import IntelOrchestrator, LiveIntelConfig

orchestrator = IntelOrchestrator(LiveIntelConfig.from_env())
await orchestrator.run_once()

adjustments = orchestrator.get_dispatch_adjustments("NORTH_AMERICA", "GROUND")
print(adjustments.rate_multiplier, adjustments.delay_factor)

for alert in orchestrator.get_active_alerts(limit=10):
    print(alert.severity, alert.message)
```

============================================================
"""

from .models import (
    IntelCategory,
    SourceStatus,
    AdvisoryLevel,
    OrchestratorState,
    SourceDescriptor,
    Advisory,
    IntelPayload,
    Snapshot,
    HealthRecord,
    CacheEntry,
    Alert,
    CollectionOutcome,
    RunSummary,
    IntelView,
    DispatchAdjustments,
    TreasuryInsights,
    OrchestratorStatus,
)
from .config import LiveIntelConfig
from .exceptions import (
    LiveIntelError,
    CollectionError,
    PersistenceError,
    AuditLogError,
    UnknownSourceError,
    ConfigurationError,
)
from .clock import ClockProtocol, SystemClock, MockClock
from .collectors import IntelCollector, SimulatedCollector, FunctionCollector
from .registry import SourceRegistry
from .sources import build_default_registry
from .health import HealthTracker
from .cache import ResultCache
from .alerts import AlertAggregator
from .runner import CollectorRunner
from .persistence import SnapshotSink, NullSnapshotSink, SqlSnapshotStore
from .audit import AuditLog, NullAuditLog, CodexAuditLog
from .reader import IntelReader
from .orchestrator import IntelOrchestrator, LiveIntelState


__all__ = [
    # Models
    "IntelCategory",
    "SourceStatus",
    "AdvisoryLevel",
    "OrchestratorState",
    "SourceDescriptor",
    "Advisory",
    "IntelPayload",
    "Snapshot",
    "HealthRecord",
    "CacheEntry",
    "Alert",
    "CollectionOutcome",
    "RunSummary",
    "IntelView",
    "DispatchAdjustments",
    "TreasuryInsights",
    "OrchestratorStatus",
    # Config
    "LiveIntelConfig",
    # Exceptions
    "LiveIntelError",
    "CollectionError",
    "PersistenceError",
    "AuditLogError",
    "UnknownSourceError",
    "ConfigurationError",
    # Time
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    # Collectors
    "IntelCollector",
    "SimulatedCollector",
    "FunctionCollector",
    "SourceRegistry",
    "build_default_registry",
    # Core
    "HealthTracker",
    "ResultCache",
    "AlertAggregator",
    "CollectorRunner",
    "IntelReader",
    "IntelOrchestrator",
    "LiveIntelState",
    # Collaborators
    "SnapshotSink",
    "NullSnapshotSink",
    "SqlSnapshotStore",
    "AuditLog",
    "NullAuditLog",
    "CodexAuditLog",
]
