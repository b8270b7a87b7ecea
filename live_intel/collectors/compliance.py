"""
Live Intel Collectors - Compliance.

Simulated regulatory update feed per jurisdiction.
"""

from typing import Any, Dict, List

from ..models import Advisory, AdvisoryLevel, IntelPayload
from .base import SimulatedCollector


JURISDICTIONS = {
    "US": ["FMCSA Hours of Service", "CBP Entry Filing", "EPA Emissions"],
    "EU": ["Mobility Package", "ICS2 Pre-Loading", "CBAM Reporting"],
    "APAC": ["China Customs Declaration", "Singapore TradeNet"],
    "LATAM": ["Carta Porte", "Brazil MDF-e"],
}

IMPACT_LEVELS = ["LOW", "MEDIUM", "HIGH"]


class RegulatoryCollector(SimulatedCollector):
    """Pending rule changes; HIGH impact changes due within a week are flagged."""

    async def collect(self) -> IntelPayload:
        updates: Dict[str, List[Dict[str, Any]]] = {}
        advisories: List[Advisory] = []

        for jurisdiction, rules in JURISDICTIONS.items():
            updates[jurisdiction] = []
            for rule in rules:
                if self.rng.random() > 0.3:
                    continue

                impact = self.rng.choice(IMPACT_LEVELS)
                days_until_effective = self.rng.randint(0, 90)
                updates[jurisdiction].append({
                    "rule": rule,
                    "impact": impact,
                    "days_until_effective": days_until_effective,
                })

                if impact == "HIGH" and days_until_effective <= 7:
                    advisories.append(Advisory(
                        level=AdvisoryLevel.WARNING,
                        message=f"{jurisdiction} rule change '{rule}' takes effect in {days_until_effective} days",
                        details={"jurisdiction": jurisdiction, "rule": rule},
                    ))

        return IntelPayload(
            metrics={
                "updates": updates,
                "pending_changes": sum(len(v) for v in updates.values()),
            },
            advisories=advisories,
        )
