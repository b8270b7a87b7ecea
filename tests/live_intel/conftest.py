"""
Shared fixtures for live intel tests.
"""

import pytest

from live_intel.alerts import AlertAggregator
from live_intel.cache import ResultCache
from live_intel.clock import MockClock
from live_intel.health import HealthTracker
from live_intel.registry import SourceRegistry
from live_intel.runner import CollectorRunner

from tests.live_intel.helpers import START


@pytest.fixture
def clock() -> MockClock:
    return MockClock(START)


@pytest.fixture
def registry() -> SourceRegistry:
    return SourceRegistry()


@pytest.fixture
def health() -> HealthTracker:
    return HealthTracker()


@pytest.fixture
def cache(clock) -> ResultCache:
    return ResultCache(clock)


@pytest.fixture
def alerts(clock) -> AlertAggregator:
    return AlertAggregator(clock, max_alerts=100, alert_ttl_seconds=3600)


@pytest.fixture
def runner(registry, health, cache, alerts, clock) -> CollectorRunner:
    return CollectorRunner(
        registry=registry,
        health=health,
        cache=cache,
        alerts=alerts,
        clock=clock,
        default_ttl_seconds=60,
    )
