"""
Tests for the collector runner.

============================================================
COVERAGE
============================================================
- Success path: health, cache, sink, alerts
- Failure path: failure streaks, stale-serve, no re-append
- Invalid payloads and timeouts count as failures
- Best-effort persistence, including unexpected sink errors
- String advisory levels are coerced
============================================================
"""

import asyncio
from datetime import timedelta

import pytest

from live_intel.collectors.base import FunctionCollector
from live_intel.exceptions import PersistenceError, UnknownSourceError
from live_intel.models import Advisory, AdvisoryLevel, IntelCategory, IntelPayload, SourceStatus
from live_intel.persistence import SnapshotSink
from live_intel.runner import CollectorRunner

from tests.live_intel.helpers import FlakyCollector, make_descriptor, make_payload


class RecordingSink(SnapshotSink):
    def __init__(self, fail=False):
        self.snapshots = []
        self.fail = fail

    async def persist(self, snapshot):
        if self.fail:
            raise PersistenceError("disk full", source_id=snapshot.source_id)
        self.snapshots.append(snapshot)


def _weather_payload():
    return make_payload(
        advisories=[Advisory(AdvisoryLevel.WARNING, "STORM conditions affecting Chicago")],
        conditions={"NORTH_AMERICA": {}},
    )


class TestRunnerSuccess:

    @pytest.mark.asyncio
    async def test_success_updates_health_cache_and_alerts(self, registry, runner, health, cache, alerts, clock):
        registry.register(make_descriptor("weather", IntelCategory.OPERATIONAL), FunctionCollector(_weather_payload))

        outcome = await runner.run("weather")

        assert outcome.success
        assert not outcome.stale
        assert outcome.snapshot.obtained_at == clock.now()
        assert outcome.snapshot.category == IntelCategory.OPERATIONAL

        record = health.get("weather")
        assert record.status == SourceStatus.HEALTHY
        assert record.failure_count == 0
        assert record.last_success == clock.now()

        entry = cache.get("weather")
        assert entry.snapshot is outcome.snapshot
        assert entry.expires_at == clock.now() + timedelta(seconds=60)

        [alert] = alerts.all()
        assert alert.source_id == "weather"
        assert alert.category == IntelCategory.OPERATIONAL
        assert alert.message == "STORM conditions affecting Chicago"

    @pytest.mark.asyncio
    async def test_per_source_ttl_override(self, registry, runner, cache, clock):
        registry.register(make_descriptor("fast", ttl_seconds=5), FunctionCollector(make_payload))

        await runner.run("fast")

        assert cache.get("fast").expires_at == clock.now() + timedelta(seconds=5)

    @pytest.mark.asyncio
    async def test_success_forwarded_to_sink(self, registry, health, cache, alerts, clock):
        sink = RecordingSink()
        runner = CollectorRunner(registry, health, cache, alerts, clock, sink=sink)
        registry.register(make_descriptor("a"), FunctionCollector(make_payload))

        outcome = await runner.run("a")

        assert sink.snapshots == [outcome.snapshot]

    @pytest.mark.asyncio
    async def test_persistence_failure_is_swallowed(self, registry, health, cache, alerts, clock):
        runner = CollectorRunner(registry, health, cache, alerts, clock, sink=RecordingSink(fail=True))
        registry.register(make_descriptor("a"), FunctionCollector(make_payload))

        outcome = await runner.run("a")

        assert outcome.success
        assert cache.get("a") is not None
        assert health.get("a").status == SourceStatus.HEALTHY

    @pytest.mark.asyncio
    async def test_unexpected_sink_error_is_swallowed(self, registry, health, cache, alerts, clock):
        class BrokenSink(SnapshotSink):
            async def persist(self, snapshot):
                raise RuntimeError("connection reset")

        runner = CollectorRunner(registry, health, cache, alerts, clock, sink=BrokenSink())
        registry.register(make_descriptor("a"), FunctionCollector(make_payload))

        outcome = await runner.run("a")

        assert outcome.success
        assert cache.get("a").snapshot is outcome.snapshot
        assert health.get("a").status == SourceStatus.HEALTHY

    @pytest.mark.asyncio
    async def test_string_advisory_levels_are_coerced(self, registry, runner, alerts):
        payload = IntelPayload(
            {"x": 1},
            [Advisory("WARNING", "storm"), Advisory("critical", "port closed"), Advisory("LOUD", "odd")],
        )
        registry.register(make_descriptor("a"), FunctionCollector(lambda: payload))

        outcome = await runner.run("a")

        assert outcome.success
        levels = [a.level for a in outcome.snapshot.advisories]
        assert levels == [AdvisoryLevel.WARNING, AdvisoryLevel.CRITICAL, AdvisoryLevel.INFO]
        assert [a.to_dict()["severity"] for a in alerts.all()] == ["WARNING", "CRITICAL", "INFO"]
        assert outcome.snapshot.to_dict()["advisories"][0]["level"] == "WARNING"

    @pytest.mark.asyncio
    async def test_unknown_source_raises(self, runner):
        with pytest.raises(UnknownSourceError):
            await runner.run("nope")


class TestRunnerFailure:

    @pytest.mark.asyncio
    async def test_n_failures_keep_last_snapshot(self, registry, runner, health, cache):
        collector = FlakyCollector(make_payload)
        registry.register(make_descriptor("a"), collector)

        first = await runner.run("a")
        collector.fail = True
        for _ in range(3):
            outcome = await runner.run("a")

        record = health.get("a")
        assert record.failure_count == 3
        assert record.status == SourceStatus.DEGRADED
        assert record.last_error == "upstream unavailable"
        assert cache.get("a").snapshot is first.snapshot

        assert not outcome.success
        assert outcome.stale
        assert outcome.snapshot is first.snapshot
        assert outcome.error == "upstream unavailable"

    @pytest.mark.asyncio
    async def test_success_after_failures_resets(self, registry, runner, health):
        collector = FlakyCollector(make_payload)
        registry.register(make_descriptor("a"), collector)

        collector.fail = True
        await runner.run("a")
        await runner.run("a")
        collector.fail = False
        await runner.run("a")

        record = health.get("a")
        assert record.failure_count == 0
        assert record.status == SourceStatus.HEALTHY

    @pytest.mark.asyncio
    async def test_failure_without_cache_is_unavailable(self, registry, runner, cache):
        collector = FlakyCollector(make_payload)
        collector.fail = True
        registry.register(make_descriptor("a"), collector)

        outcome = await runner.run("a")

        assert not outcome.success
        assert not outcome.stale
        assert not outcome.available
        assert cache.get("a") is None

    @pytest.mark.asyncio
    async def test_stale_serve_does_not_reappend_advisories(self, registry, runner, alerts):
        collector = FlakyCollector(_weather_payload)
        registry.register(make_descriptor("weather"), collector)

        await runner.run("weather")
        collector.fail = True
        outcome = await runner.run("weather")

        assert outcome.stale
        assert len(alerts) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_result", [
        None,
        {"metrics": {}},
        make_payload(),
    ])
    async def test_invalid_payload_counts_as_failure(self, registry, runner, health, bad_result):
        if hasattr(bad_result, "metrics"):
            bad_result.metrics = ["not", "a", "mapping"]
        registry.register(make_descriptor("a"), FunctionCollector(lambda: bad_result))

        outcome = await runner.run("a")

        assert not outcome.success
        assert health.get("a").failure_count == 1

    @pytest.mark.asyncio
    async def test_non_advisory_entries_rejected(self, registry, runner, alerts):
        payload = make_payload()
        payload.advisories = ["just a string"]
        registry.register(make_descriptor("a"), FunctionCollector(lambda: payload))

        outcome = await runner.run("a")

        assert not outcome.success
        assert len(alerts) == 0

    @pytest.mark.asyncio
    async def test_timeout_counts_as_failure(self, registry, health, cache, alerts, clock):
        async def slow():
            await asyncio.sleep(5)
            return make_payload()

        runner = CollectorRunner(
            registry, health, cache, alerts, clock, collector_timeout_seconds=0.01
        )
        registry.register(make_descriptor("slow"), FunctionCollector(slow))

        outcome = await runner.run("slow")

        assert not outcome.success
        assert "timed out" in outcome.error
        assert health.get("slow").status == SourceStatus.DEGRADED
