"""
Live Intel - Source Registry.

============================================================
STATIC SOURCE TABLE
============================================================

Maps a source id to its descriptor and collector:
- Registration happens once at startup
- Iteration order is registration order
- Read-only once sealed

============================================================
"""

import logging
from typing import Dict, List, Optional, Tuple

from .collectors.base import IntelCollector
from .exceptions import ConfigurationError, UnknownSourceError
from .models import IntelCategory, SourceDescriptor


logger = logging.getLogger(__name__)


class SourceRegistry:
    """
    Registry of intelligence sources.

    Usage:
        registry = SourceRegistry()
        registry.register(descriptor, FuelPriceCollector())
        registry.seal()

        descriptor = registry.lookup("fuel-prices")
        collector = registry.collector_for("fuel-prices")
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[SourceDescriptor, IntelCollector]] = {}
        self._sealed = False

    # =========================================================
    # REGISTRATION
    # =========================================================

    def register(self, descriptor: SourceDescriptor, collector: IntelCollector) -> None:
        """
        Register a source.

        Raises:
            ConfigurationError: if sealed, duplicate id, or bad collector
        """
        if self._sealed:
            raise ConfigurationError(
                f"Registry is sealed, cannot register '{descriptor.source_id}'",
                config_key="sources",
            )
        if descriptor.source_id in self._entries:
            raise ConfigurationError(
                f"Source '{descriptor.source_id}' already registered",
                config_key="sources",
            )
        if not isinstance(collector, IntelCollector):
            raise ConfigurationError(
                f"Collector for '{descriptor.source_id}' must be an IntelCollector",
                config_key="sources",
            )

        self._entries[descriptor.source_id] = (descriptor, collector)
        logger.info(
            f"Registered source '{descriptor.source_id}' "
            f"(category={descriptor.category.value}, provider={descriptor.provider})"
        )

    def seal(self) -> None:
        """Make the registry read-only."""
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    # =========================================================
    # QUERIES
    # =========================================================

    def lookup(self, source_id: str) -> Optional[SourceDescriptor]:
        """Get descriptor for a source, or None."""
        entry = self._entries.get(source_id)
        return entry[0] if entry else None

    def get(self, source_id: str) -> SourceDescriptor:
        """
        Get descriptor for a source.

        Raises:
            UnknownSourceError: if the id is not registered
        """
        entry = self._entries.get(source_id)
        if entry is None:
            raise UnknownSourceError(source_id, self.source_ids())
        return entry[0]

    def collector_for(self, source_id: str) -> IntelCollector:
        """Get the collector bound to a source."""
        entry = self._entries.get(source_id)
        if entry is None:
            raise UnknownSourceError(source_id, self.source_ids())
        return entry[1]

    def source_ids(self) -> List[str]:
        """All source ids in registration order."""
        return list(self._entries.keys())

    def descriptors(self) -> List[SourceDescriptor]:
        return [descriptor for descriptor, _ in self._entries.values()]

    def by_category(self, category: IntelCategory) -> List[SourceDescriptor]:
        return [d for d in self.descriptors() if d.category == category]

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
