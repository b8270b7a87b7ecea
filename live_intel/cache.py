"""
Live Intel - Result Cache.

Latest Snapshot per source with an absolute expiry instant.
Freshness is computed lazily by readers; entries are superseded,
never evicted in the background.
"""

from datetime import timedelta
from typing import Dict, Optional

from .clock import ClockProtocol
from .models import CacheEntry, Snapshot


class ResultCache:
    """Per-source snapshot cache."""

    def __init__(self, clock: ClockProtocol) -> None:
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, source_id: str) -> Optional[CacheEntry]:
        return self._entries.get(source_id)

    def set(self, source_id: str, snapshot: Snapshot, ttl_seconds: float) -> CacheEntry:
        """Store snapshot with expiry = now + ttl."""
        entry = CacheEntry(
            snapshot=snapshot,
            expires_at=self._clock.now() + timedelta(seconds=ttl_seconds),
        )
        self._entries[source_id] = entry
        return entry

    def entries(self) -> Dict[str, CacheEntry]:
        return dict(self._entries)

    def is_fresh(self, source_id: str) -> bool:
        entry = self._entries.get(source_id)
        return entry is not None and entry.is_fresh(self._clock.now())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._entries
