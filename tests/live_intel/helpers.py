"""
Shared builders for live intel tests.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from live_intel.collectors.base import FunctionCollector
from live_intel.models import Advisory, IntelCategory, IntelPayload, SourceDescriptor


START = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_payload(advisories: Optional[List[Advisory]] = None, **metrics) -> IntelPayload:
    return IntelPayload(metrics=metrics or {"value": 1}, advisories=advisories or [])


def make_descriptor(
    source_id: str,
    category: IntelCategory = IntelCategory.MARKET,
    ttl_seconds: Optional[float] = None,
) -> SourceDescriptor:
    return SourceDescriptor(source_id, source_id.title(), category, ttl_seconds=ttl_seconds)


class FlakyCollector(FunctionCollector):
    """Succeeds or raises depending on a mutable flag."""

    def __init__(self, payload_factory: Callable[[], IntelPayload]) -> None:
        self.fail = False
        self.calls = 0

        def collect() -> IntelPayload:
            self.calls += 1
            if self.fail:
                raise RuntimeError("upstream unavailable")
            return payload_factory()

        super().__init__(collect)
