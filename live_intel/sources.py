"""
Live Intel - Built-in Sources.

Descriptor table of the built-in intelligence sources and the
factory that binds each one to its collector.
"""

import random
from typing import Dict, Optional, Type

from .collectors import (
    AirportStatusCollector,
    DemandSignalCollector,
    FreightRateCollector,
    FuelPriceCollector,
    PartnerBoardCollector,
    PortStatusCollector,
    RegulatoryCollector,
    SimulatedCollector,
    TrafficCollector,
    WeatherCollector,
)
from .models import IntelCategory, SourceDescriptor
from .registry import SourceRegistry


FREIGHT_RATES = SourceDescriptor("freight-rates", "Freight Rate Index", IntelCategory.MARKET)
FUEL_PRICES = SourceDescriptor("fuel-prices", "Fuel Price Monitor", IntelCategory.MARKET)
WEATHER = SourceDescriptor("weather", "Weather Conditions", IntelCategory.OPERATIONAL)
TRAFFIC = SourceDescriptor("traffic", "Traffic & Delays", IntelCategory.OPERATIONAL)
PORT_STATUS = SourceDescriptor("port-status", "Port Operations", IntelCategory.OPERATIONAL)
AIRPORT_STATUS = SourceDescriptor("airport-status", "Airport Operations", IntelCategory.OPERATIONAL)
REGULATORY = SourceDescriptor("regulatory", "Regulatory Updates", IntelCategory.COMPLIANCE)
PARTNER_BOARDS = SourceDescriptor("partner-boards", "Partner Loadboard Status", IntelCategory.PARTNER)
DEMAND_SIGNALS = SourceDescriptor("demand-signals", "Market Demand", IntelCategory.MARKET)

# Registration order is run order.
DEFAULT_SOURCES: Dict[SourceDescriptor, Type[SimulatedCollector]] = {
    FREIGHT_RATES: FreightRateCollector,
    FUEL_PRICES: FuelPriceCollector,
    WEATHER: WeatherCollector,
    TRAFFIC: TrafficCollector,
    PORT_STATUS: PortStatusCollector,
    AIRPORT_STATUS: AirportStatusCollector,
    REGULATORY: RegulatoryCollector,
    PARTNER_BOARDS: PartnerBoardCollector,
    DEMAND_SIGNALS: DemandSignalCollector,
}


def build_default_registry(rng: Optional[random.Random] = None) -> SourceRegistry:
    """
    Build a registry with every built-in source.

    Args:
        rng: Shared random generator (seed it for reproducible runs)
    """
    rng = rng or random.Random()
    registry = SourceRegistry()
    for descriptor, collector_class in DEFAULT_SOURCES.items():
        registry.register(descriptor, collector_class(rng))
    return registry
