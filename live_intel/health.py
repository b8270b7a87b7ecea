"""
Live Intel - Health Tracker.

In-memory map of source id to HealthRecord. Changes only as a
side effect of Collector Runner outcomes; there are no timers.
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional
import logging

from .models import HealthRecord, SourceStatus


logger = logging.getLogger(__name__)


class HealthTracker:
    """Per-source health bookkeeping."""

    def __init__(self) -> None:
        self._records: Dict[str, HealthRecord] = {}

    def record_success(self, source_id: str, at: datetime, duration_ms: float) -> HealthRecord:
        """Mark a source HEALTHY and reset its failure streak."""
        previous = self._records.get(source_id)
        record = HealthRecord(
            source_id=source_id,
            status=SourceStatus.HEALTHY,
            last_success=at,
            last_attempt=at,
            failure_count=0,
            last_duration_ms=duration_ms,
        )
        self._records[source_id] = record

        if previous is not None and previous.status == SourceStatus.DEGRADED:
            logger.info(
                f"[{source_id}] Recovered after {previous.failure_count} consecutive failures"
            )
        return record

    def record_failure(
        self,
        source_id: str,
        at: datetime,
        error: str,
        duration_ms: Optional[float] = None,
    ) -> HealthRecord:
        """Mark a source DEGRADED and extend its failure streak."""
        previous = self._records.get(source_id)
        record = HealthRecord(
            source_id=source_id,
            status=SourceStatus.DEGRADED,
            last_success=previous.last_success if previous else None,
            last_error=error,
            last_attempt=at,
            failure_count=(previous.failure_count if previous else 0) + 1,
            last_duration_ms=duration_ms,
        )
        self._records[source_id] = record
        return record

    def get(self, source_id: str) -> Optional[HealthRecord]:
        record = self._records.get(source_id)
        return replace(record) if record else None

    def snapshot(self) -> Dict[str, HealthRecord]:
        """Read-only copies of every record."""
        return {k: replace(v) for k, v in self._records.items()}

    def sources_with_status(self, status: SourceStatus) -> List[str]:
        return [k for k, v in self._records.items() if v.status == status]
