"""
Live Intel Collectors - Operational.

Simulated operational readings:
- Weather per city
- Traffic per freight corridor
- Port congestion
- Airport operations
"""

from typing import Any, Dict, List

from ..models import Advisory, AdvisoryLevel, IntelPayload
from .base import SimulatedCollector


WEATHER_CITIES = {
    "NORTH_AMERICA": ["New York", "Los Angeles", "Chicago", "Houston", "Miami"],
    "EUROPE": ["London", "Frankfurt", "Rotterdam", "Paris", "Madrid"],
    "ASIA_PACIFIC": ["Shanghai", "Singapore", "Tokyo", "Hong Kong", "Sydney"],
    "LATAM": ["Sao Paulo", "Mexico City", "Buenos Aires", "Bogota", "Lima"],
}

WEATHER_CONDITIONS = ["CLEAR", "CLOUDY", "RAIN", "STORM", "SNOW", "FOG"]
WEATHER_SEVERITY = {"CLEAR": 0, "CLOUDY": 1, "RAIN": 2, "FOG": 3, "SNOW": 4, "STORM": 5}
SEVERE_WEATHER_IMPACT = 4

CORRIDORS = {
    "NORTH_AMERICA": [
        {"name": "I-95 Corridor", "from": "Boston", "to": "Miami"},
        {"name": "I-10 Corridor", "from": "Los Angeles", "to": "Houston"},
        {"name": "I-80 Corridor", "from": "San Francisco", "to": "Chicago"},
    ],
    "EUROPE": [
        {"name": "A1/E45", "from": "Milan", "to": "Hamburg"},
        {"name": "A4/E40", "from": "Lisbon", "to": "Kyiv"},
    ],
    "ASIA_PACIFIC": [
        {"name": "China-Japan Route", "from": "Shanghai", "to": "Tokyo"},
        {"name": "ASEAN Corridor", "from": "Singapore", "to": "Bangkok"},
    ],
}

PORTS = {
    "NORTH_AMERICA": ["Los Angeles", "Long Beach", "New York", "Savannah", "Houston"],
    "EUROPE": ["Rotterdam", "Hamburg", "Antwerp", "Valencia", "Felixstowe"],
    "ASIA_PACIFIC": ["Shanghai", "Singapore", "Shenzhen", "Busan", "Hong Kong"],
    "LATAM": ["Santos", "Manzanillo", "Callao", "Cartagena", "Buenos Aires"],
}

AIRPORTS = {
    "NORTH_AMERICA": ["ORD", "LAX", "JFK", "MEM", "ANC"],
    "EUROPE": ["FRA", "LHR", "CDG", "AMS", "LEJ"],
    "ASIA_PACIFIC": ["HKG", "PVG", "ICN", "NRT", "SIN"],
    "LATAM": ["GRU", "MEX", "BOG", "SCL", "LIM"],
}


def _level(value: float, high: float, moderate: float, labels=("HIGH", "MODERATE", "LOW")) -> str:
    if value > high:
        return labels[0]
    if value > moderate:
        return labels[1]
    return labels[2]


class WeatherCollector(SimulatedCollector):
    """City weather; SNOW and STORM produce advisories."""

    async def collect(self) -> IntelPayload:
        conditions: Dict[str, Dict[str, Any]] = {}
        advisories: List[Advisory] = []

        for region, cities in WEATHER_CITIES.items():
            conditions[region] = {}
            for city in cities:
                condition = self.rng.choice(WEATHER_CONDITIONS)
                impact = WEATHER_SEVERITY[condition]

                if condition == "FOG":
                    visibility = "LOW"
                elif condition == "STORM":
                    visibility = "POOR"
                else:
                    visibility = "GOOD"

                conditions[region][city] = {
                    "condition": condition,
                    "temperature": self.rng.randint(-5, 34),
                    "wind_speed": self.rng.randint(0, 49),
                    "visibility": visibility,
                    "impact_score": impact,
                }

                if impact >= SEVERE_WEATHER_IMPACT:
                    advisories.append(Advisory(
                        level=AdvisoryLevel.WARNING,
                        message=f"{condition} conditions affecting {city} - expect delays",
                        details={"region": region, "city": city, "condition": condition},
                    ))

        return IntelPayload(
            metrics={
                "conditions": conditions,
                "alert_count": len(advisories),
            },
            advisories=advisories,
        )


class TrafficCollector(SimulatedCollector):
    """Corridor congestion and estimated delay in minutes."""

    async def collect(self) -> IntelPayload:
        corridors: Dict[str, List[Dict[str, Any]]] = {}
        advisories: List[Advisory] = []

        for region, routes in CORRIDORS.items():
            corridors[region] = []
            for route in routes:
                congestion = self.rng.random()
                delay_minutes = int(congestion * 120)
                level = _level(congestion, 0.7, 0.4)

                corridors[region].append({
                    **route,
                    "congestion_level": level,
                    "estimated_delay": delay_minutes,
                    "incidents": self.rng.randint(0, 2),
                })

                if level == "HIGH":
                    advisories.append(Advisory(
                        level=AdvisoryLevel.WARNING,
                        message=f"Heavy congestion on {route['name']} - {delay_minutes} min delay",
                        details={"region": region, "corridor": route["name"]},
                    ))

        return IntelPayload(
            metrics={
                "corridors": corridors,
                "total_delays": len(advisories),
            },
            advisories=advisories,
        )


class PortStatusCollector(SimulatedCollector):
    """Port congestion; wait_time is in days."""

    async def collect(self) -> IntelPayload:
        ports: Dict[str, List[Dict[str, Any]]] = {}
        advisories: List[Advisory] = []

        for region, names in PORTS.items():
            ports[region] = []
            for port in names:
                congestion = self.rng.random()
                wait_days = int(congestion * 7)
                status = _level(congestion, 0.8, 0.5, ("CONGESTED", "BUSY", "NORMAL"))

                if status == "CONGESTED":
                    advisories.append(Advisory(
                        level=AdvisoryLevel.WARNING,
                        message=f"Port {port} experiencing {wait_days}-day wait times",
                        details={"region": region, "port": port},
                    ))

                ports[region].append({
                    "name": port,
                    "status": status,
                    "wait_time": wait_days,
                    "berth_availability": int((1 - congestion) * 100),
                    "vessel_queue": int(congestion * 30),
                })

        congested = sum(
            1 for region_ports in ports.values()
            for p in region_ports if p["status"] == "CONGESTED"
        )

        return IntelPayload(
            metrics={
                "ports": ports,
                "global_congestion": congested,
            },
            advisories=advisories,
        )


class AirportStatusCollector(SimulatedCollector):
    """Cargo airport operations; delay is in minutes."""

    async def collect(self) -> IntelPayload:
        airports: Dict[str, List[Dict[str, Any]]] = {}
        advisories: List[Advisory] = []

        for region, codes in AIRPORTS.items():
            airports[region] = []
            for code in codes:
                disruption = self.rng.random()
                delay_minutes = int(disruption * 180)
                status = _level(disruption, 0.85, 0.55, ("DISRUPTED", "DELAYED", "NORMAL"))

                if status == "DISRUPTED":
                    advisories.append(Advisory(
                        level=AdvisoryLevel.WARNING,
                        message=f"Airport {code} cargo operations disrupted - {delay_minutes} min delays",
                        details={"region": region, "airport": code},
                    ))

                airports[region].append({
                    "code": code,
                    "status": status,
                    "average_delay": delay_minutes,
                    "cargo_capacity": int((1 - disruption) * 100),
                })

        return IntelPayload(
            metrics={
                "airports": airports,
                "disrupted_count": len(advisories),
            },
            advisories=advisories,
        )
