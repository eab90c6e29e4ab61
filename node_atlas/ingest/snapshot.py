"""Persistence of the last good catalog snapshot."""
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from node_atlas.models.catalog import CatalogEntity, CatalogSnapshot

logger = structlog.get_logger()


class SnapshotFile:
    """Stores a CatalogSnapshot as JSON on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def save(self, entities: list[CatalogEntity], revision: Optional[str]) -> CatalogSnapshot:
        snapshot = CatalogSnapshot(
            revision=revision,
            saved_at=datetime.now(timezone.utc),
            entities=list(entities),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Readers only ever see a complete file
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        tmp.replace(self.path)

        logger.info("snapshot_saved", path=str(self.path), entity_count=len(entities), revision=revision)
        return snapshot

    def load(self) -> Optional[CatalogSnapshot]:
        """Read the snapshot, or None when it is missing or unreadable."""
        if not self.path.exists():
            return None
        try:
            return CatalogSnapshot.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.error("snapshot_unreadable", path=str(self.path), error=str(e))
            return None
