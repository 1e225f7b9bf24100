"""In-memory cache of processed family networks."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from juuret.corpus.locator import normalize_family_id
from juuret.logging import get_logger

if TYPE_CHECKING:
    from juuret.models import FamilyNetwork
    from juuret.workflow import CitationSet

logger = get_logger(__name__)


@dataclass
class CachedNetwork:
    """One processed family with its citations."""
    network: FamilyNetwork
    citations: CitationSet
    extraction_seconds: float = 0.0
    cached_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class NetworkCache:
    """Processed networks keyed by normalized family id."""

    def __init__(self) -> None:
        self._entries: dict[str, CachedNetwork] = {}

    def get(self, family_id: str) -> CachedNetwork | None:
        return self._entries.get(normalize_family_id(family_id))

    def put(self, entry: CachedNetwork) -> None:
        key = normalize_family_id(entry.network.main_family.family_id)
        self._entries[key] = entry
        logger.debug("cache.stored", family_id=key, seconds=round(entry.extraction_seconds, 3))

    def invalidate(self, family_id: str) -> bool:
        key = normalize_family_id(family_id)
        removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("cache.invalidated", family_id=key)
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def family_ids(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, family_id: object) -> bool:
        return isinstance(family_id, str) and normalize_family_id(family_id) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
