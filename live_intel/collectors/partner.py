"""
Live Intel Collectors - Partner.

Simulated heartbeat of partner loadboards and marketplaces.
"""

from datetime import datetime, timezone

from ..models import Advisory, AdvisoryLevel, IntelPayload
from .base import SimulatedCollector


PARTNERS = [
    {"id": "dat-freight", "name": "DAT Freight", "type": "LOADBOARD"},
    {"id": "uber-freight", "name": "Uber Freight", "type": "LOADBOARD"},
    {"id": "freightos", "name": "Freightos", "type": "MARKETPLACE"},
    {"id": "convoy", "name": "Convoy", "type": "LOADBOARD"},
    {"id": "flexport", "name": "Flexport", "type": "FORWARDER"},
    {"id": "shiprocket", "name": "ShipRocket", "type": "COURIER"},
    {"id": "sendle", "name": "Sendle", "type": "COURIER"},
    {"id": "freightview", "name": "FreightView", "type": "LOADBOARD"},
    {"id": "loadsmith", "name": "Loadsmith", "type": "LOADBOARD"},
]


class PartnerBoardCollector(SimulatedCollector):
    """Partner uptime, latency and contract availability."""

    async def collect(self) -> IntelPayload:
        heartbeat = datetime.now(timezone.utc).isoformat()
        partners = []

        for partner in PARTNERS:
            online = self.rng.random() > 0.05
            partners.append({
                **partner,
                "status": "ONLINE" if online else "OFFLINE",
                "uptime": round((0.95 + self.rng.random() * 0.05) * 100, 2),
                "avg_response_time": int(100 + self.rng.random() * 400),
                "contracts_available": self.rng.randint(10, 59) if online else 0,
                "last_heartbeat": heartbeat,
            })

        offline = [p for p in partners if p["status"] == "OFFLINE"]

        return IntelPayload(
            metrics={
                "partners": partners,
                "online_count": len(partners) - len(offline),
                "total_contracts": sum(p["contracts_available"] for p in partners),
            },
            advisories=[
                Advisory(
                    level=AdvisoryLevel.WARNING,
                    message=f"Partner {p['name']} is currently offline",
                    details={"partner": p["id"]},
                )
                for p in offline
            ],
        )
