"""
Catalog of nutrient data sources with their reliability (confidence_factor) and priority.
Loaded once per fusion request from the store. Read-only.
"""
from typing import Iterable, Optional
import logging

from core.models.nutrition import SourceProfile

logger = logging.getLogger(__name__)


class SourceRegistry:
    """source_id -> SourceProfile, iterated in descending priority."""

    def __init__(self, sources: Iterable[SourceProfile] = ()):
        ordered = sorted(sources, key=lambda s: s.priority, reverse=True)
        self._by_id: dict[str, SourceProfile] = {}
        for s in ordered:
            if s.source_id in self._by_id:
                logger.warning("SOURCE_REGISTRY duplicate source_id=%s; keeping higher priority", s.source_id)
                continue
            self._by_id[s.source_id] = s

    @classmethod
    def from_store(cls, store) -> "SourceRegistry":
        registry = cls(store.load_sources())
        logger.info("Loaded %d nutrition sources", len(registry))
        return registry

    def get(self, source_id: Optional[str]) -> Optional[SourceProfile]:
        if source_id is None:
            return None
        return self._by_id.get(str(source_id))

    def list_ids(self) -> list[str]:
        return list(self._by_id.keys())

    def __iter__(self):
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)
