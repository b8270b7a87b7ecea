"""
Live Intel - Alert Aggregator.

============================================================
PURPOSE
============================================================
Bounded, time-expiring feed of advisories emitted by collectors.

RULES (applied on every append):
- Count: drop from the head while length > max_alerts
- Time: remove every entry whose expires_at < now

An alert can be evicted by count pressure before it expires.

============================================================
"""

import logging
import uuid
from datetime import timedelta
from typing import List

from .clock import ClockProtocol
from .models import Advisory, Alert, IntelCategory


logger = logging.getLogger(__name__)


def generate_alert_id(clock: ClockProtocol, prefix: str = "ALERT") -> str:
    """Generate an id like ALERT-1718000000000-1A2B3C4D."""
    millis = int(clock.timestamp() * 1000)
    return f"{prefix}-{millis}-{uuid.uuid4().hex[:8].upper()}"


class AlertAggregator:
    """
    Rolling alert feed.

    Usage:
        alerts = AlertAggregator(clock, max_alerts=100, alert_ttl_seconds=3600)
        alerts.record("weather", IntelCategory.OPERATIONAL, advisory)
        active = alerts.get_active_alerts(limit=20)  # newest first
    """

    def __init__(
        self,
        clock: ClockProtocol,
        max_alerts: int = 100,
        alert_ttl_seconds: float = 3600.0,
    ) -> None:
        self._clock = clock
        self._max_alerts = max_alerts
        self._alert_ttl = timedelta(seconds=alert_ttl_seconds)
        self._alerts: List[Alert] = []
        self._total_appended = 0

    @property
    def max_alerts(self) -> int:
        return self._max_alerts

    def record(self, source_id: str, category: IntelCategory, advisory: Advisory) -> Alert:
        """Build an Alert from a collector advisory and append it."""
        now = self._clock.now()
        alert = Alert(
            alert_id=generate_alert_id(self._clock),
            source_id=source_id,
            category=category,
            severity=advisory.level,
            message=advisory.message,
            created_at=now,
            expires_at=now + self._alert_ttl,
        )
        self.append(alert)
        return alert

    def append(self, alert: Alert) -> None:
        """Append at the tail, then enforce count and time bounds."""
        self._alerts.append(alert)
        self._total_appended += 1

        overflow = len(self._alerts) - self._max_alerts
        if overflow > 0:
            self._alerts = self._alerts[overflow:]

        now = self._clock.now()
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if not a.is_expired(now)]
        expired = before - len(self._alerts)
        if expired:
            logger.debug(f"Swept {expired} expired alerts")

    def get_active_alerts(self, limit: int = 50) -> List[Alert]:
        """Up to `limit` non-expired alerts, newest first."""
        if limit <= 0:
            return []
        now = self._clock.now()
        active = [a for a in self._alerts if a.expires_at > now]
        return active[-limit:][::-1]

    def all(self) -> List[Alert]:
        """Buffer contents, oldest first."""
        return list(self._alerts)

    def stats(self) -> dict:
        return {
            "buffered": len(self._alerts),
            "max_alerts": self._max_alerts,
            "total_appended": self._total_appended,
        }

    def __len__(self) -> int:
        return len(self._alerts)
