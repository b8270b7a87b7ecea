"""
Live Intel - Collector Runner.

============================================================
RESPONSIBILITY
============================================================
Runs one source's collector and applies the outcome:

SUCCESS:
- Health -> HEALTHY, failure_count = 0
- Cache  <- Snapshot (expiry = now + TTL)
- Sink   <- Snapshot (best-effort)
- Alerts <- every advisory of the Snapshot

FAILURE (raised, timed out, invalid data):
- Health -> DEGRADED, failure_count += 1
- Cache untouched
- Previously cached Snapshot is stale-served (if any)
- No advisories are re-appended

CollectionError never propagates past this class.

============================================================
"""

import asyncio
import logging
from typing import Optional

from .alerts import AlertAggregator
from .cache import ResultCache
from .clock import ClockProtocol
from .exceptions import CollectionError, PersistenceError
from .health import HealthTracker
from .models import Advisory, CollectionOutcome, IntelPayload, Snapshot, SourceDescriptor
from .persistence import NullSnapshotSink, SnapshotSink
from .registry import SourceRegistry


logger = logging.getLogger(__name__)


class CollectorRunner:
    """Executes collectors with per-source failure isolation."""

    def __init__(
        self,
        registry: SourceRegistry,
        health: HealthTracker,
        cache: ResultCache,
        alerts: AlertAggregator,
        clock: ClockProtocol,
        default_ttl_seconds: float = 60.0,
        collector_timeout_seconds: Optional[float] = None,
        sink: Optional[SnapshotSink] = None,
    ) -> None:
        self._registry = registry
        self._health = health
        self._cache = cache
        self._alerts = alerts
        self._clock = clock
        self._default_ttl = default_ttl_seconds
        self._timeout = collector_timeout_seconds
        self._sink = sink or NullSnapshotSink()

    def ttl_for(self, descriptor: SourceDescriptor) -> float:
        if descriptor.ttl_seconds is not None:
            return descriptor.ttl_seconds
        return self._default_ttl

    async def run(self, source_id: str) -> CollectionOutcome:
        """
        Run one source.

        Raises:
            UnknownSourceError: if source_id is not registered
        """
        descriptor = self._registry.get(source_id)
        collector = self._registry.collector_for(source_id)

        started = self._clock.monotonic()
        try:
            payload = await self._collect(source_id, collector)
        except CollectionError as e:
            return self._on_failure(descriptor, e, self._clock.elapsed_ms(started))

        duration_ms = self._clock.elapsed_ms(started)
        snapshot = Snapshot(
            source_id=source_id,
            category=descriptor.category,
            obtained_at=self._clock.now(),
            metrics=payload.metrics,
            advisories=list(payload.advisories),
        )
        await self._on_success(descriptor, snapshot, duration_ms)
        return CollectionOutcome(
            source_id=source_id,
            success=True,
            snapshot=snapshot,
            duration_ms=duration_ms,
        )

    async def _collect(self, source_id: str, collector) -> IntelPayload:
        """Invoke the collector and validate its output."""
        try:
            if self._timeout is not None:
                result = await asyncio.wait_for(collector.collect(), timeout=self._timeout)
            else:
                result = await collector.collect()
        except asyncio.TimeoutError as e:
            raise CollectionError(source_id, f"timed out after {self._timeout}s", e) from e
        except Exception as e:
            raise CollectionError(source_id, str(e) or type(e).__name__, e) from e

        if not isinstance(result, IntelPayload):
            raise CollectionError(source_id, f"invalid payload type {type(result).__name__}")
        if not isinstance(result.metrics, dict):
            raise CollectionError(source_id, "metrics must be a mapping")
        if not isinstance(result.advisories, (list, tuple)) or any(
            not isinstance(a, Advisory) for a in result.advisories
        ):
            raise CollectionError(source_id, "advisories must be Advisory instances")
        return result

    async def _on_success(
        self,
        descriptor: SourceDescriptor,
        snapshot: Snapshot,
        duration_ms: float,
    ) -> None:
        source_id = descriptor.source_id
        self._health.record_success(source_id, self._clock.now(), duration_ms)
        self._cache.set(source_id, snapshot, self.ttl_for(descriptor))

        try:
            await self._sink.persist(snapshot)
        except PersistenceError as e:
            logger.error(f"[{source_id}] Snapshot persistence failed: {e.message}")
        except Exception as e:
            logger.error(f"[{source_id}] Snapshot persistence failed: {e}")

        for advisory in snapshot.advisories:
            self._alerts.record(source_id, descriptor.category, advisory)

        logger.debug(
            f"[{source_id}] Collected in {duration_ms:.1f}ms "
            f"({len(snapshot.advisories)} advisories)"
        )

    def _on_failure(
        self,
        descriptor: SourceDescriptor,
        error: CollectionError,
        duration_ms: float,
    ) -> CollectionOutcome:
        source_id = descriptor.source_id
        record = self._health.record_failure(
            source_id, self._clock.now(), error.reason, duration_ms
        )
        logger.error(
            f"[{source_id}] Collector failed ({record.failure_count} consecutive): {error.reason}"
        )

        cached = self._cache.get(source_id)
        if cached is not None:
            logger.warning(f"[{source_id}] Using cached data from {cached.snapshot.obtained_at.isoformat()}")

        return CollectionOutcome(
            source_id=source_id,
            success=False,
            snapshot=cached.snapshot if cached else None,
            stale=cached is not None,
            error=error.reason,
            duration_ms=duration_ms,
        )
