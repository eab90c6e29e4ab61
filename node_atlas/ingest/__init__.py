"""Node ingestion: remote source, parsing, snapshots and refresh."""
from node_atlas.ingest.github import GitHubNodeSource, NodeSource
from node_atlas.ingest.parser import RawNodeRecord, parse_entity_record
from node_atlas.ingest.refresher import CatalogRefresher
from node_atlas.ingest.snapshot import SnapshotFile
from node_atlas.ingest.throttle import RateLimiter

__all__ = [
    "GitHubNodeSource",
    "NodeSource",
    "RawNodeRecord",
    "parse_entity_record",
    "CatalogRefresher",
    "SnapshotFile",
    "RateLimiter",
]
