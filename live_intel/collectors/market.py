"""
Live Intel Collectors - Market.

Simulated market readings:
- Freight rate index per region and mode
- Fuel prices per fuel type
- Demand signals per region and mode
"""

import math
import time
from typing import Any, Dict, List

from ..models import Advisory, AdvisoryLevel, IntelPayload
from .base import SimulatedCollector


REGIONS = ["NORTH_AMERICA", "EUROPE", "ASIA_PACIFIC", "LATAM"]
MODES = ["GROUND", "AIR", "OCEAN", "COURIER"]

BASE_RATES = {"GROUND": 2.15, "AIR": 4.50, "OCEAN": 0.85, "COURIER": 8.25}
REGION_RATE_MULTIPLIERS = {
    "NORTH_AMERICA": 1.0,
    "EUROPE": 1.15,
    "ASIA_PACIFIC": 0.90,
    "LATAM": 0.85,
}

BASE_FUEL_PRICES = {
    "DIESEL": 3.85,
    "GASOLINE": 3.45,
    "JET_FUEL": 4.20,
    "BUNKER": 0.65,
}


def _trend(change: float, threshold: float) -> str:
    if change > threshold:
        return "UP"
    if change < -threshold:
        return "DOWN"
    return "STABLE"


class FreightRateCollector(SimulatedCollector):
    """Freight rate index with shared volatility and an hourly cycle."""

    async def collect(self) -> IntelPayload:
        volatility = (self.rng.random() - 0.5) * 0.1
        cycle = math.sin(time.time() / 3600) * 0.05

        rates: Dict[str, Dict[str, Any]] = {}
        for region in REGIONS:
            rates[region] = {}
            for mode in MODES:
                base = BASE_RATES[mode] * REGION_RATE_MULTIPLIERS[region]
                current = base * (1 + volatility + cycle)
                change_24h = (self.rng.random() - 0.5) * 0.08

                rates[region][mode] = {
                    "current": round(current, 3),
                    "change_24h": round(change_24h * 100, 2),
                    "trend": _trend(change_24h, 0.02),
                    "unit": "per_teu" if mode == "OCEAN" else "per_mile",
                }

        advisories = []
        if abs(volatility) > 0.04:
            advisories.append(Advisory(
                level=AdvisoryLevel.INFO,
                message="Elevated rate volatility detected across markets",
            ))

        return IntelPayload(
            metrics={
                "rates": rates,
                "market_health": "STRONG" if volatility > 0 else "MODERATE",
            },
            advisories=advisories,
        )


class FuelPriceCollector(SimulatedCollector):
    """Fuel prices moving together by one volatility draw."""

    async def collect(self) -> IntelPayload:
        volatility = (self.rng.random() - 0.5) * 0.15

        prices = {}
        for fuel, base in BASE_FUEL_PRICES.items():
            prices[fuel] = {
                "current": round(base * (1 + volatility), 3),
                "change_24h": round(volatility * 100, 2),
                "trend": _trend(volatility, 0.03),
                "unit": "per_mt" if fuel == "BUNKER" else "per_gallon",
            }

        advisories = []
        if volatility > 0.08:
            advisories.append(Advisory(
                level=AdvisoryLevel.WARNING,
                message="Significant fuel price increase detected - review margin calculations",
            ))

        return IntelPayload(
            metrics={
                "prices": prices,
                "average_change": round(volatility * 100, 2),
            },
            advisories=advisories,
        )


class DemandSignalCollector(SimulatedCollector):
    """Demand score per lane; scores above 80 are flagged as hotspots."""

    async def collect(self) -> IntelPayload:
        demand: Dict[str, Dict[str, Any]] = {}
        opportunities: List[Advisory] = []

        for region in REGIONS:
            demand[region] = {}
            for mode in MODES:
                level = self.rng.random()
                score = int(level * 100)

                if level > 0.6:
                    trend = "INCREASING"
                elif level < 0.4:
                    trend = "DECREASING"
                else:
                    trend = "STABLE"

                demand[region][mode] = {
                    "demand_score": score,
                    "trend": trend,
                    "capacity_utilization": int(level * 95),
                    "projected_growth": round((level - 0.5) * 20, 1),
                }

                if score > 80:
                    opportunities.append(Advisory(
                        level=AdvisoryLevel.INFO,
                        message=f"High demand in {region} {mode} - expansion opportunity",
                        details={"region": region, "mode": mode},
                    ))

        return IntelPayload(
            metrics={
                "demand": demand,
                "hotspots": len(opportunities),
            },
            advisories=opportunities,
        )
