"""
Tests for the orchestrator loop.

============================================================
COVERAGE
============================================================
- One run over every source with per-source isolation
- Single-flight: reentrant runs are no-ops
- Timer lifecycle and dropped ticks
- Audit summary emission
- Independent orchestrator instances
============================================================
"""

import asyncio

import pytest

from live_intel.audit import AuditLog, NullAuditLog
from live_intel.collectors.base import FunctionCollector
from live_intel.config import LiveIntelConfig
from live_intel.exceptions import ConfigurationError
from live_intel.models import Advisory, AdvisoryLevel, OrchestratorState, SourceStatus
from live_intel.orchestrator import AUDIT_EVENT_TYPE, AUDIT_MODULE, IntelOrchestrator
from live_intel.registry import SourceRegistry
from live_intel.sources import build_default_registry

from tests.live_intel.helpers import FlakyCollector, make_descriptor, make_payload


def _failing():
    raise RuntimeError("feed down")


def _three_source_registry():
    registry = SourceRegistry()
    registry.register(make_descriptor("a"), FunctionCollector(make_payload))
    registry.register(
        make_descriptor("b"),
        FunctionCollector(lambda: make_payload(advisories=[Advisory(AdvisoryLevel.INFO, "note")])),
    )
    registry.register(make_descriptor("c"), FunctionCollector(_failing))
    return registry


class ExplodingAuditLog(AuditLog):
    async def log_event(self, event_type, module, payload):
        raise RuntimeError("audit unreachable")


@pytest.fixture
def config():
    return LiveIntelConfig(collector_timeout_seconds=None)


class TestRunOnce:

    @pytest.mark.asyncio
    async def test_two_succeed_one_fails(self, config, clock):
        orchestrator = IntelOrchestrator(config, registry=_three_source_registry(), clock=clock)

        summary = await orchestrator.run_once()

        assert summary.run_number == 1
        assert summary.succeeded_sources == ["a", "b"]
        assert summary.failed_sources == ["c"]
        assert summary.alerts_generated == 1

        status = orchestrator.get_orchestrator_status()
        assert status.run_count == 1
        assert status.state == OrchestratorState.IDLE
        assert status.last_run_at == clock.now()
        assert status.source_health["a"].status == SourceStatus.HEALTHY
        assert status.source_health["b"].status == SourceStatus.HEALTHY
        assert status.source_health["c"].status == SourceStatus.DEGRADED
        assert status.source_health["c"].failure_count == 1
        assert set(status.cache_status) == {"a", "b"}
        assert len(orchestrator.state.cache) == 2

    @pytest.mark.asyncio
    async def test_registry_sealed_on_construction(self, config, clock):
        registry = _three_source_registry()
        IntelOrchestrator(config, registry=registry, clock=clock)

        with pytest.raises(ConfigurationError):
            registry.register(make_descriptor("d"), FunctionCollector(make_payload))

    def test_invalid_config_rejected(self, clock):
        with pytest.raises(ConfigurationError):
            IntelOrchestrator(LiveIntelConfig(max_alerts=0), registry=SourceRegistry(), clock=clock)

    @pytest.mark.asyncio
    async def test_stale_sources_listed(self, config, clock):
        collector = FlakyCollector(make_payload)
        registry = SourceRegistry()
        registry.register(make_descriptor("a"), collector)
        orchestrator = IntelOrchestrator(config, registry=registry, clock=clock)

        await orchestrator.run_once()
        collector.fail = True
        summary = await orchestrator.run_once()

        assert summary.run_number == 2
        assert summary.failed_sources == ["a"]
        assert summary.stale_sources == ["a"]
        assert orchestrator.get_latest_intel()["a"].snapshot.metrics == {"value": 1}

    @pytest.mark.asyncio
    async def test_cache_status_reports_expiry(self, config, clock):
        orchestrator = IntelOrchestrator(config, registry=_three_source_registry(), clock=clock)
        await orchestrator.run_once()

        clock.advance(config.cache_ttl_seconds + 1)
        status = orchestrator.get_orchestrator_status().to_dict()

        assert status["cache_status"]["a"]["cached"] is True
        assert status["cache_status"]["a"]["expired"] is True
        assert status["run_count"] == 1

    @pytest.mark.asyncio
    async def test_default_registry_runs_all_sources(self, config, clock):
        import random

        orchestrator = IntelOrchestrator(
            config, registry=build_default_registry(random.Random(5)), clock=clock
        )

        summary = await orchestrator.run_once()

        assert summary.succeeded == 9
        assert summary.failed == 0
        assert len(orchestrator.get_latest_intel()) == 9


class TestSingleFlight:

    @pytest.mark.asyncio
    async def test_reentrant_run_is_noop(self, config, clock):
        started = asyncio.Event()
        release = asyncio.Event()

        async def blocking():
            started.set()
            await release.wait()
            return make_payload()

        registry = SourceRegistry()
        registry.register(make_descriptor("slow"), FunctionCollector(blocking))
        orchestrator = IntelOrchestrator(config, registry=registry, clock=clock)

        first = asyncio.ensure_future(orchestrator.run_once())
        await started.wait()

        assert orchestrator.is_busy
        assert orchestrator.state.state == OrchestratorState.RUNNING
        assert await orchestrator.run_once() is None
        assert orchestrator.state.run_count == 1

        release.set()
        summary = await first

        assert summary.run_number == 1
        assert orchestrator.state.run_count == 1
        assert not orchestrator.is_busy
        assert orchestrator.state.state == OrchestratorState.IDLE


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_start_runs_immediately_and_per_tick(self, config, clock):
        orchestrator = IntelOrchestrator(config, registry=_three_source_registry(), clock=clock)

        await orchestrator.start(interval_seconds=0.01)
        assert orchestrator.is_running
        await asyncio.sleep(0.1)
        await orchestrator.stop()
        await orchestrator.wait_idle()

        assert not orchestrator.is_running
        count = orchestrator.state.run_count
        assert count >= 2

        await asyncio.sleep(0.05)
        assert orchestrator.state.run_count == count

    @pytest.mark.asyncio
    async def test_ticks_during_run_are_dropped(self, config, clock):
        started = asyncio.Event()
        release = asyncio.Event()

        async def blocking():
            started.set()
            await release.wait()
            return make_payload()

        registry = SourceRegistry()
        registry.register(make_descriptor("slow"), FunctionCollector(blocking))
        orchestrator = IntelOrchestrator(config, registry=registry, clock=clock)

        await orchestrator.start(interval_seconds=0.01)
        await started.wait()
        await asyncio.sleep(0.05)
        await orchestrator.stop()

        release.set()
        await orchestrator.wait_idle()

        assert orchestrator.state.run_count == 1

    @pytest.mark.asyncio
    async def test_stop_lets_in_flight_run_finish(self, config, clock):
        started = asyncio.Event()
        release = asyncio.Event()

        async def blocking():
            started.set()
            await release.wait()
            return make_payload()

        registry = SourceRegistry()
        registry.register(make_descriptor("slow"), FunctionCollector(blocking))
        orchestrator = IntelOrchestrator(config, registry=registry, clock=clock)

        await orchestrator.start(interval_seconds=10)
        await started.wait()
        await orchestrator.stop()
        release.set()
        await orchestrator.wait_idle()

        assert orchestrator.state.last_summary.succeeded_sources == ["slow"]

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self, config, clock):
        orchestrator = IntelOrchestrator(config, registry=SourceRegistry(), clock=clock)
        await orchestrator.stop()
        assert not orchestrator.is_running

    @pytest.mark.asyncio
    @pytest.mark.parametrize("interval", [0, -1.5])
    async def test_non_positive_interval_rejected(self, config, clock, interval):
        orchestrator = IntelOrchestrator(config, registry=SourceRegistry(), clock=clock)

        with pytest.raises(ConfigurationError):
            await orchestrator.start(interval_seconds=interval)

        assert not orchestrator.is_running
        assert orchestrator.state.run_count == 0


class TestAuditEmission:

    @pytest.mark.asyncio
    async def test_summary_logged_per_run(self, config, clock):
        audit = NullAuditLog()
        orchestrator = IntelOrchestrator(
            config, registry=_three_source_registry(), clock=clock, audit_log=audit
        )

        await orchestrator.run_once()
        await orchestrator.run_once()

        assert len(audit.events) == 2
        event = audit.events[-1]
        assert event["type"] == AUDIT_EVENT_TYPE == "LIVE_INTEL_UPDATE"
        assert event["module"] == AUDIT_MODULE == "LIVE_INTEL"
        assert event["data"]["run_number"] == 2
        assert event["data"]["succeeded"] == 2
        assert event["data"]["failed_sources"] == ["c"]

    @pytest.mark.asyncio
    async def test_audit_failure_is_swallowed(self, config, clock):
        orchestrator = IntelOrchestrator(
            config, registry=_three_source_registry(), clock=clock, audit_log=ExplodingAuditLog()
        )

        summary = await orchestrator.run_once()

        assert summary is not None
        assert orchestrator.state.run_count == 1


class TestIndependentInstances:

    @pytest.mark.asyncio
    async def test_state_not_shared(self, config, clock):
        first = IntelOrchestrator(config, registry=_three_source_registry(), clock=clock)
        second = IntelOrchestrator(config, registry=_three_source_registry(), clock=clock)

        await first.run_once()

        assert first.state.run_count == 1
        assert second.state.run_count == 0
        assert second.get_latest_intel() == {}
