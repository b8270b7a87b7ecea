"""
Live Intel - Orchestrator.

============================================================
RESPONSIBILITY
============================================================
Drives periodic collection across every registered source.

- One run = every source, in registration order, each
  behind its own exception boundary
- At most one run in flight (single-flight try-lock)
- Ticks that land on a busy orchestrator are dropped
- Each completed run is summarized to the audit log

============================================================
STATE
============================================================
All mutable state lives in one LiveIntelState owned by the
orchestrator instance. Several orchestrators can coexist.

============================================================
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Set

from .alerts import AlertAggregator
from .audit import AuditLog, NullAuditLog
from .cache import ResultCache
from .clock import ClockProtocol, SystemClock
from .config import LiveIntelConfig
from .exceptions import ConfigurationError
from .health import HealthTracker
from .models import (
    Alert,
    CollectionOutcome,
    DispatchAdjustments,
    IntelCategory,
    IntelView,
    OrchestratorState,
    OrchestratorStatus,
    RunSummary,
    TreasuryInsights,
)
from .persistence import SnapshotSink
from .reader import IntelReader
from .registry import SourceRegistry
from .runner import CollectorRunner
from .sources import build_default_registry


logger = logging.getLogger(__name__)


AUDIT_EVENT_TYPE = "LIVE_INTEL_UPDATE"
AUDIT_MODULE = "LIVE_INTEL"


@dataclass
class LiveIntelState:
    """Everything one orchestrator owns."""
    registry: SourceRegistry
    health: HealthTracker
    cache: ResultCache
    alerts: AlertAggregator
    state: OrchestratorState = OrchestratorState.IDLE
    run_count: int = 0
    last_run_at: Optional[datetime] = None
    last_summary: Optional[RunSummary] = None


class IntelOrchestrator:
    """
    Periodic live intel collection.

    Usage:
        orchestrator = IntelOrchestrator(LiveIntelConfig.from_env())
        await orchestrator.start()
        ...
        adjustments = orchestrator.get_dispatch_adjustments("NORTH_AMERICA", "GROUND")
        await orchestrator.stop()
    """

    def __init__(
        self,
        config: Optional[LiveIntelConfig] = None,
        registry: Optional[SourceRegistry] = None,
        clock: Optional[ClockProtocol] = None,
        sink: Optional[SnapshotSink] = None,
        audit_log: Optional[AuditLog] = None,
    ) -> None:
        self._config = config or LiveIntelConfig()

        errors = self._config.validate()
        if errors:
            raise ConfigurationError(f"Invalid configuration: {', '.join(errors)}")

        self._clock = clock or SystemClock()
        registry = registry if registry is not None else build_default_registry()
        registry.seal()

        self._state = LiveIntelState(
            registry=registry,
            health=HealthTracker(),
            cache=ResultCache(self._clock),
            alerts=AlertAggregator(
                self._clock,
                max_alerts=self._config.max_alerts,
                alert_ttl_seconds=self._config.alert_ttl_seconds,
            ),
        )
        self._runner = CollectorRunner(
            registry=registry,
            health=self._state.health,
            cache=self._state.cache,
            alerts=self._state.alerts,
            clock=self._clock,
            default_ttl_seconds=self._config.cache_ttl_seconds,
            collector_timeout_seconds=self._config.collector_timeout_seconds,
            sink=sink,
        )
        self._reader = IntelReader(
            self._state.cache,
            self._state.alerts,
            self._clock,
            default_alert_limit=self._config.default_alert_limit,
        )
        self._audit_log = audit_log or NullAuditLog()

        self._run_lock = threading.Lock()
        self._timer_task: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

        logger.info(f"Live intel orchestrator initialized with {len(registry)} sources")

    # --------------------------------------------------------
    # Properties
    # --------------------------------------------------------

    @property
    def config(self) -> LiveIntelConfig:
        return self._config

    @property
    def state(self) -> LiveIntelState:
        return self._state

    @property
    def audit_log(self) -> AuditLog:
        return self._audit_log

    @property
    def is_running(self) -> bool:
        """Whether the periodic timer is active."""
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def is_busy(self) -> bool:
        """Whether a run is in flight."""
        return self._run_lock.locked()

    # --------------------------------------------------------
    # Runs
    # --------------------------------------------------------

    async def run_once(self) -> Optional[RunSummary]:
        """
        Run every registered source once.

        Returns:
            RunSummary, or None if a run was already in flight
        """
        if not self._run_lock.acquire(blocking=False):
            logger.debug("Run already in progress, skipping")
            return None

        state = self._state
        try:
            state.state = OrchestratorState.RUNNING
            state.run_count += 1
            summary = RunSummary(run_number=state.run_count, started_at=self._clock.now())
            started = self._clock.monotonic()

            logger.info(f"=== Live intel run #{summary.run_number} ===")

            for source_id in state.registry.source_ids():
                outcome = await self._run_source(source_id)
                if outcome.success:
                    summary.succeeded_sources.append(source_id)
                    summary.alerts_generated += len(outcome.snapshot.advisories)
                else:
                    summary.failed_sources.append(source_id)
                    if outcome.stale:
                        summary.stale_sources.append(source_id)

            summary.duration_ms = self._clock.elapsed_ms(started)
            state.last_run_at = summary.started_at
            state.last_summary = summary

            logger.info(
                f"Run #{summary.run_number} complete: {summary.succeeded} success, "
                f"{summary.failed} failed, {summary.alerts_generated} alerts "
                f"({summary.duration_ms:.0f}ms)"
            )
        finally:
            state.state = OrchestratorState.IDLE
            self._run_lock.release()

        await self._emit_summary(summary)
        return summary

    async def _run_source(self, source_id: str) -> CollectionOutcome:
        try:
            return await self._runner.run(source_id)
        except Exception as e:
            logger.error(f"[{source_id}] Unexpected error during collection: {e}", exc_info=True)
            return CollectionOutcome(source_id=source_id, success=False, error=str(e))

    async def _emit_summary(self, summary: RunSummary) -> None:
        try:
            await self._audit_log.log_event(AUDIT_EVENT_TYPE, AUDIT_MODULE, summary.to_dict())
        except Exception as e:
            logger.error(f"Failed to log run #{summary.run_number} to audit log: {e}")

    # --------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------

    async def start(self, interval_seconds: Optional[float] = None) -> None:
        """
        Fire one run now and then one per tick.

        Must be awaited inside a running event loop.
        """
        if self.is_running:
            logger.warning("Live intel orchestrator already running")
            return

        interval = self._config.run_interval_seconds if interval_seconds is None else interval_seconds
        if interval <= 0:
            raise ConfigurationError("interval_seconds must be positive", config_key="interval_seconds")

        logger.info(f"Starting live intel orchestrator (interval: {interval}s)")
        self._spawn_run()
        self._timer_task = asyncio.ensure_future(self._tick_loop(interval))

    async def stop(self) -> None:
        """Cancel the timer; an in-flight run completes on its own."""
        task = self._timer_task
        if task is None:
            return

        self._timer_task = None
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        logger.info("Live intel orchestrator stopped")

    async def wait_idle(self) -> None:
        """Wait for every spawned run to finish."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def _tick_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            if self.is_busy:
                logger.debug("Tick dropped: run in flight")
                continue
            self._spawn_run()

    def _spawn_run(self) -> None:
        task = asyncio.ensure_future(self.run_once())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    # --------------------------------------------------------
    # Status
    # --------------------------------------------------------

    def get_orchestrator_status(self) -> OrchestratorStatus:
        now = self._clock.now()
        cache_status = {
            source_id: {
                "cached": True,
                "expires_at": entry.expires_at.isoformat(),
                "expired": not entry.is_fresh(now),
            }
            for source_id, entry in self._state.cache.entries().items()
        }
        return OrchestratorStatus(
            running=self.is_running,
            state=self._state.state,
            last_run_at=self._state.last_run_at,
            run_count=self._state.run_count,
            last_summary=self._state.last_summary,
            source_health=self._state.health.snapshot(),
            cache_status=cache_status,
        )

    # --------------------------------------------------------
    # Read API
    # --------------------------------------------------------

    @property
    def reader(self) -> IntelReader:
        return self._reader

    def get_latest_intel(self, category: Optional[IntelCategory] = None) -> Dict[str, IntelView]:
        return self._reader.get_latest_intel(category)

    def get_market_intel(self) -> Dict[str, IntelView]:
        return self._reader.get_market_intel()

    def get_operational_intel(self) -> Dict[str, IntelView]:
        return self._reader.get_operational_intel()

    def get_compliance_intel(self) -> Dict[str, IntelView]:
        return self._reader.get_compliance_intel()

    def get_partner_intel(self) -> Dict[str, IntelView]:
        return self._reader.get_partner_intel()

    def get_active_alerts(self, limit: Optional[int] = None) -> List[Alert]:
        return self._reader.get_active_alerts(limit)

    def get_dispatch_adjustments(self, region: str, mode: str) -> DispatchAdjustments:
        return self._reader.get_dispatch_adjustments(region, mode)

    def get_treasury_insights(self) -> TreasuryInsights:
        return self._reader.get_treasury_insights()


__all__ = [
    "AUDIT_EVENT_TYPE",
    "AUDIT_MODULE",
    "IntelOrchestrator",
    "LiveIntelState",
]
