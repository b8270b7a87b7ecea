"""
Tests for the source registry and the built-in source table.
"""

import random

import pytest

from live_intel.collectors.base import FunctionCollector
from live_intel.exceptions import ConfigurationError, UnknownSourceError
from live_intel.models import IntelCategory
from live_intel.registry import SourceRegistry
from live_intel.sources import build_default_registry

from tests.live_intel.helpers import make_descriptor, make_payload


class TestSourceRegistry:
    """Registration and lookup."""

    def test_lookup_registered_source(self, registry):
        descriptor = make_descriptor("fuel-prices")
        registry.register(descriptor, FunctionCollector(make_payload))

        assert registry.lookup("fuel-prices") == descriptor
        assert registry.get("fuel-prices") == descriptor
        assert "fuel-prices" in registry
        assert len(registry) == 1

    def test_lookup_unknown_returns_none(self, registry):
        assert registry.lookup("nope") is None

    def test_get_unknown_raises(self, registry):
        registry.register(make_descriptor("a"), FunctionCollector(make_payload))

        with pytest.raises(UnknownSourceError) as exc_info:
            registry.get("nope")

        assert exc_info.value.source_id == "nope"

    def test_collector_for_unknown_raises(self, registry):
        with pytest.raises(UnknownSourceError):
            registry.collector_for("nope")

    def test_source_ids_in_registration_order(self, registry):
        for source_id in ["c", "a", "b"]:
            registry.register(make_descriptor(source_id), FunctionCollector(make_payload))

        assert registry.source_ids() == ["c", "a", "b"]

    def test_duplicate_registration_rejected(self, registry):
        registry.register(make_descriptor("a"), FunctionCollector(make_payload))

        with pytest.raises(ConfigurationError):
            registry.register(make_descriptor("a"), FunctionCollector(make_payload))

    def test_non_collector_rejected(self, registry):
        with pytest.raises(ConfigurationError):
            registry.register(make_descriptor("a"), object())

    def test_sealed_registry_is_read_only(self, registry):
        registry.register(make_descriptor("a"), FunctionCollector(make_payload))
        registry.seal()

        assert registry.is_sealed
        with pytest.raises(ConfigurationError):
            registry.register(make_descriptor("b"), FunctionCollector(make_payload))
        assert registry.source_ids() == ["a"]

    def test_by_category(self, registry):
        registry.register(make_descriptor("a", IntelCategory.MARKET), FunctionCollector(make_payload))
        registry.register(make_descriptor("b", IntelCategory.PARTNER), FunctionCollector(make_payload))

        assert [d.source_id for d in registry.by_category(IntelCategory.PARTNER)] == ["b"]


class TestDefaultRegistry:
    """Built-in sources."""

    def test_nine_sources_in_fixed_order(self):
        registry = build_default_registry(random.Random(1))

        assert registry.source_ids() == [
            "freight-rates",
            "fuel-prices",
            "weather",
            "traffic",
            "port-status",
            "airport-status",
            "regulatory",
            "partner-boards",
            "demand-signals",
        ]

    def test_categories(self):
        registry = build_default_registry(random.Random(1))

        assert registry.get("weather").category == IntelCategory.OPERATIONAL
        assert registry.get("regulatory").category == IntelCategory.COMPLIANCE
        assert registry.get("partner-boards").category == IntelCategory.PARTNER
        assert registry.get("demand-signals").category == IntelCategory.MARKET

    def test_fresh_registry_is_not_sealed(self):
        assert not build_default_registry().is_sealed
        assert isinstance(build_default_registry(), SourceRegistry)
