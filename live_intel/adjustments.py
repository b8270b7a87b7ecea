"""
Live Intel - Adjustment Folds.

============================================================
PURE DERIVATIONS
============================================================

Folds over already-cached snapshots; no I/O, no clock.

DISPATCH (per region and mode):
- Freight trend UP/DOWN       -> rate x1.05 / x0.95
- Fuel change_24h > 5%        -> rate x1.02
- Severe weather (impact >= 4)-> +30 min per city, risk +15
- HIGH traffic corridors      -> +estimated_delay min, risk +10
- Congested ports (OCEAN)     -> +wait_time*24*60 min, risk +20

TREASURY:
- Fuel average_change > 3 / < -3  -> RISING / FALLING
- Freight market_health           -> FAVORABLE / CHALLENGED
- Demand hotspots > 5 / < 2       -> STRONG / WEAK

============================================================
"""

from typing import Any, Mapping, Optional

from .models import DispatchAdjustments, IntelView, TreasuryInsights


FREIGHT_RATES = "freight-rates"
FUEL_PRICES = "fuel-prices"
WEATHER = "weather"
TRAFFIC = "traffic"
PORT_STATUS = "port-status"
DEMAND_SIGNALS = "demand-signals"

FUEL_SURGE_PERCENT = 5.0
SEVERE_WEATHER_IMPACT = 4
SEVERE_WEATHER_DELAY_MINUTES = 30
SEVERE_WEATHER_RISK = 15
TRAFFIC_RISK = 10
PORT_CONGESTION_RISK = 20
MINUTES_PER_DAY = 24 * 60


def _metrics(intel: Mapping[str, IntelView], source_id: str) -> Optional[Mapping[str, Any]]:
    view = intel.get(source_id)
    return view.metrics if view is not None else None


def _path(data: Optional[Mapping[str, Any]], *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


def fuel_type_for(mode: str) -> str:
    if mode == "AIR":
        return "JET_FUEL"
    if mode == "OCEAN":
        return "BUNKER"
    return "DIESEL"


def compute_dispatch_adjustments(
    intel: Mapping[str, IntelView],
    region: str,
    mode: str,
) -> DispatchAdjustments:
    """Fold cached intel into pricing/dispatch adjustments."""
    adjustments = DispatchAdjustments()

    rate = _path(_metrics(intel, FREIGHT_RATES), "rates", region, mode)
    if rate:
        if rate.get("trend") == "UP":
            adjustments.rate_multiplier = 1.05
        elif rate.get("trend") == "DOWN":
            adjustments.rate_multiplier = 0.95

    fuel = _path(_metrics(intel, FUEL_PRICES), "prices", fuel_type_for(mode))
    if fuel and fuel.get("change_24h", 0) > FUEL_SURGE_PERCENT:
        adjustments.rate_multiplier *= 1.02
        adjustments.advisories.append("Fuel price surge affecting costs")

    weather = _path(_metrics(intel, WEATHER), "conditions", region)
    if weather:
        severe = [w for w in weather.values() if w.get("impact_score", 0) >= SEVERE_WEATHER_IMPACT]
        if severe:
            adjustments.delay_factor += len(severe) * SEVERE_WEATHER_DELAY_MINUTES
            adjustments.risk_score += SEVERE_WEATHER_RISK
            adjustments.advisories.append(f"Severe weather in {len(severe)} cities")

    corridors = _path(_metrics(intel, TRAFFIC), "corridors", region)
    if corridors:
        congested = [c for c in corridors if c.get("congestion_level") == "HIGH"]
        if congested:
            adjustments.delay_factor += sum(c.get("estimated_delay", 0) for c in congested)
            adjustments.risk_score += TRAFFIC_RISK

    if mode == "OCEAN":
        ports = _path(_metrics(intel, PORT_STATUS), "ports", region)
        if ports:
            congested = [p for p in ports if p.get("status") == "CONGESTED"]
            if congested:
                adjustments.delay_factor += sum(
                    p.get("wait_time", 0) * MINUTES_PER_DAY for p in congested
                )
                adjustments.risk_score += PORT_CONGESTION_RISK
                adjustments.advisories.append(f"{len(congested)} ports congested")

    return adjustments


def compute_treasury_insights(intel: Mapping[str, IntelView]) -> TreasuryInsights:
    """Fold cached intel into a coarse treasury outlook."""
    insights = TreasuryInsights()

    fuel = _metrics(intel, FUEL_PRICES)
    if fuel:
        change = fuel.get("average_change", 0)
        if change > 3:
            insights.fuel_cost_trend = "RISING"
        elif change < -3:
            insights.fuel_cost_trend = "FALLING"

    rates = _metrics(intel, FREIGHT_RATES)
    if rates:
        if rates.get("market_health") == "STRONG":
            insights.rate_environment = "FAVORABLE"
        elif rates.get("market_health") == "WEAK":
            insights.rate_environment = "CHALLENGED"

    demand = _metrics(intel, DEMAND_SIGNALS)
    if demand:
        hotspots = demand.get("hotspots", 0)
        if hotspots > 5:
            insights.demand_outlook = "STRONG"
        elif hotspots < 2:
            insights.demand_outlook = "WEAK"

    if insights.fuel_cost_trend == "RISING":
        insights.recommendations.append("Consider fuel surcharge adjustments")
    if insights.rate_environment == "FAVORABLE":
        insights.recommendations.append("Market conditions support rate increases")
    if insights.demand_outlook == "STRONG":
        insights.recommendations.append("Expand capacity in high-demand regions")

    return insights
