"""
Live Intel - Read API.

Query surface for risk scoring, dispatch pricing and treasury
views. Reads only already-published state, so it is safe to
call while a run is in flight; a reader may see some sources
refreshed and others not yet.
"""

from typing import Dict, List, Optional

from .adjustments import compute_dispatch_adjustments, compute_treasury_insights
from .alerts import AlertAggregator
from .cache import ResultCache
from .clock import ClockProtocol
from .models import (
    Alert,
    DispatchAdjustments,
    IntelCategory,
    IntelView,
    TreasuryInsights,
)


class IntelReader:
    """Read-only view over a cache and an alert feed."""

    def __init__(
        self,
        cache: ResultCache,
        alerts: AlertAggregator,
        clock: ClockProtocol,
        default_alert_limit: int = 50,
    ) -> None:
        self._cache = cache
        self._alerts = alerts
        self._clock = clock
        self._default_alert_limit = default_alert_limit

    def get_latest_intel(self, category: Optional[IntelCategory] = None) -> Dict[str, IntelView]:
        """Every cached snapshot, optionally filtered by category."""
        now = self._clock.now()
        result = {}
        for source_id, entry in self._cache.entries().items():
            if category is not None and entry.snapshot.category != category:
                continue
            age = (now - entry.snapshot.obtained_at).total_seconds()
            result[source_id] = IntelView(
                snapshot=entry.snapshot,
                from_cache=not entry.is_fresh(now),
                cache_age=max(0, int(age)),
            )
        return result

    def get_market_intel(self) -> Dict[str, IntelView]:
        return self.get_latest_intel(IntelCategory.MARKET)

    def get_operational_intel(self) -> Dict[str, IntelView]:
        return self.get_latest_intel(IntelCategory.OPERATIONAL)

    def get_compliance_intel(self) -> Dict[str, IntelView]:
        return self.get_latest_intel(IntelCategory.COMPLIANCE)

    def get_partner_intel(self) -> Dict[str, IntelView]:
        return self.get_latest_intel(IntelCategory.PARTNER)

    def get_active_alerts(self, limit: Optional[int] = None) -> List[Alert]:
        return self._alerts.get_active_alerts(
            self._default_alert_limit if limit is None else limit
        )

    def get_dispatch_adjustments(self, region: str, mode: str) -> DispatchAdjustments:
        return compute_dispatch_adjustments(self.get_latest_intel(), region, mode)

    def get_treasury_insights(self) -> TreasuryInsights:
        return compute_treasury_insights(self.get_latest_intel())
