"""Catalog refresh from a remote node source.

A refresh either replaces the live collection with freshly parsed
entities or leaves the last good collection in place. Readers are never
exposed to a partially built catalog.
"""
from typing import Optional

import structlog

from node_atlas.catalog.errors import (
    DuplicateIdentifierError,
    MalformedEntityError,
    RefreshUnavailableError,
)
from node_atlas.catalog.store import CatalogStore
from node_atlas.ingest.github import NodeSource
from node_atlas.ingest.parser import parse_entity_record
from node_atlas.ingest.snapshot import SnapshotFile
from node_atlas.models.catalog import CatalogEntity, RefreshOutcome, SkippedRecord

logger = structlog.get_logger()


class CatalogRefresher:
    """Pulls node definitions from a source into a CatalogStore."""

    def __init__(self, store: CatalogStore, source: NodeSource, snapshot: Optional[SnapshotFile] = None):
        self.store = store
        self.source = source
        self.snapshot = snapshot

    async def refresh(self, force: bool = False) -> RefreshOutcome:
        """Refresh the store from the source.

        Args:
            force: Rebuild even when the source revision is unchanged.

        Returns:
            RefreshOutcome with status ``refreshed``, ``unchanged`` or
            ``fallback``.

        Raises:
            RefreshUnavailableError: the source failed and there is neither
                a loaded catalog nor a persisted snapshot to fall back to.
        """
        logger.info("catalog_refresh_started", force=force, current_revision=self.store.revision)

        try:
            revision = await self.source.latest_revision()
        except RefreshUnavailableError as e:
            return self._fall_back(e)

        if not force and self.store.is_loaded and revision == self.store.revision:
            logger.info("catalog_refresh_unchanged", revision=revision)
            return RefreshOutcome(status="unchanged", revision=revision, entity_count=len(self.store))

        try:
            records = await self.source.fetch_records()
        except RefreshUnavailableError as e:
            return self._fall_back(e)

        entities: list[CatalogEntity] = []
        skipped: list[SkippedRecord] = []
        for record in records:
            try:
                entities.append(parse_entity_record(record))
            except MalformedEntityError as e:
                logger.warning("node_record_skipped", record=e.record, reason=e.reason)
                skipped.append(SkippedRecord(record=e.record, reason=e.reason))

        if not entities:
            return self._fall_back(
                RefreshUnavailableError("Source returned no parseable nodes", phase="parse"),
                skipped=skipped,
            )

        try:
            self.store.load(entities, revision=revision)
        except DuplicateIdentifierError as e:
            return self._fall_back(e, skipped=skipped)

        if self.snapshot is not None:
            try:
                self.snapshot.save(entities, revision)
            except OSError as e:
                logger.error("snapshot_save_failed", path=str(self.snapshot.path), error=str(e))

        logger.info(
            "catalog_refresh_completed",
            revision=revision,
            entity_count=len(entities),
            skipped_count=len(skipped),
        )
        return RefreshOutcome(
            status="refreshed",
            revision=revision,
            entity_count=len(entities),
            skipped=skipped,
        )

    def restore(self) -> bool:
        """Load the persisted snapshot into the store, if there is one."""
        if self.snapshot is None:
            return False
        saved = self.snapshot.load()
        if saved is None:
            return False
        self.store.load(saved.entities, revision=saved.revision)
        logger.info("catalog_restored", revision=saved.revision, entity_count=len(saved.entities))
        return True

    def _fall_back(self, error: Exception, skipped: Optional[list[SkippedRecord]] = None) -> RefreshOutcome:
        logger.warning("catalog_refresh_failed", error=str(error), error_type=type(error).__name__)

        if not self.store.is_loaded and not self.restore():
            raise RefreshUnavailableError(
                f"Refresh failed and no previous catalog is available: {error}",
                status_code=getattr(error, "status_code", None),
            ) from error

        logger.info("catalog_refresh_fallback", revision=self.store.revision, entity_count=len(self.store))
        return RefreshOutcome(
            status="fallback",
            revision=self.store.revision,
            entity_count=len(self.store),
            skipped=skipped or [],
            error=str(error),
        )
