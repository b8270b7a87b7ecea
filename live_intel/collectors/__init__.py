"""
Live Intel Collectors.

Self-contained, simulated collectors. Each implements the
single-method IntelCollector capability.
"""

from .base import IntelCollector, SimulatedCollector, FunctionCollector
from .market import FreightRateCollector, FuelPriceCollector, DemandSignalCollector
from .operational import (
    WeatherCollector,
    TrafficCollector,
    PortStatusCollector,
    AirportStatusCollector,
)
from .compliance import RegulatoryCollector
from .partner import PartnerBoardCollector


__all__ = [
    "IntelCollector",
    "SimulatedCollector",
    "FunctionCollector",
    "FreightRateCollector",
    "FuelPriceCollector",
    "DemandSignalCollector",
    "WeatherCollector",
    "TrafficCollector",
    "PortStatusCollector",
    "AirportStatusCollector",
    "RegulatoryCollector",
    "PartnerBoardCollector",
]
