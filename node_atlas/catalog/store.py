"""In-memory catalog store.

Holds the live collection of catalog entities. A load replaces the whole
collection in a single assignment, so readers either see the previous
snapshot or the new one, never a mix.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

import structlog

from node_atlas.catalog.errors import CatalogNotLoadedError, DuplicateIdentifierError
from node_atlas.models.catalog import CatalogEntity

logger = structlog.get_logger()


@dataclass(frozen=True)
class _Snapshot:
    entities: tuple[CatalogEntity, ...]
    by_id: dict[str, CatalogEntity]
    by_display_name: dict[str, CatalogEntity]
    revision: Optional[str] = None
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CatalogStore:
    """The live collection of catalog entities."""

    def __init__(self, entities: Optional[Iterable[CatalogEntity]] = None, revision: Optional[str] = None):
        self._snapshot: Optional[_Snapshot] = None
        if entities is not None:
            self.load(entities, revision=revision)

    def load(self, entities: Iterable[CatalogEntity], revision: Optional[str] = None) -> None:
        """Replace the collection wholesale.

        Raises:
            DuplicateIdentifierError: if two entities share an identifier.
                The previous collection stays in place.
        """
        items = tuple(entities)

        counts = Counter(e.identifier for e in items)
        duplicates = [(ident, n) for ident, n in counts.items() if n > 1]
        if duplicates:
            ident, n = duplicates[0]
            logger.error(
                "catalog_duplicate_identifier",
                identifier=ident,
                count=n,
                duplicate_count=len(duplicates),
            )
            raise DuplicateIdentifierError(ident, n)

        by_display_name: dict[str, CatalogEntity] = {}
        for entity in items:
            # First entity wins when display names collide
            by_display_name.setdefault(entity.display_name, entity)

        self._snapshot = _Snapshot(
            entities=items,
            by_id={e.identifier: e for e in items},
            by_display_name=by_display_name,
            revision=revision,
        )
        logger.info("catalog_loaded", entity_count=len(items), revision=revision)

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def revision(self) -> Optional[str]:
        return self._snapshot.revision if self._snapshot else None

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._snapshot.loaded_at if self._snapshot else None

    def _require(self, operation: str) -> _Snapshot:
        if self._snapshot is None:
            raise CatalogNotLoadedError(operation)
        return self._snapshot

    def all(self) -> tuple[CatalogEntity, ...]:
        """Get the live collection (read-only)."""
        return self._require("all").entities

    def by_identifier(self, identifier: str) -> Optional[CatalogEntity]:
        return self._require("by_identifier").by_id.get(identifier)

    def by_display_name(self, display_name: str) -> Optional[CatalogEntity]:
        return self._require("by_display_name").by_display_name.get(display_name)

    def contains(self, entity: CatalogEntity) -> bool:
        """Check that an entity is a live member of the current collection."""
        snapshot = self._require("contains")
        return snapshot.by_id.get(entity.identifier) is entity

    def __len__(self) -> int:
        return len(self._snapshot.entities) if self._snapshot else 0
