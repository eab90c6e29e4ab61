"""Construction of the catalog and its refresher from settings."""
from node_atlas.catalog.builtin import BUILTIN_REVISION, builtin_entities
from node_atlas.catalog.service import NodeCatalog
from node_atlas.catalog.store import CatalogStore
from node_atlas.config import Settings
from node_atlas.ingest.github import GitHubNodeSource
from node_atlas.ingest.refresher import CatalogRefresher
from node_atlas.ingest.snapshot import SnapshotFile
from node_atlas.ingest.throttle import RateLimiter


def build_catalog(settings: Settings) -> NodeCatalog:
    """Catalog preloaded with the built-in nodes (unless disabled)."""
    store = CatalogStore()
    if settings.load_builtin_catalog:
        store.load(builtin_entities(), revision=BUILTIN_REVISION)
    return NodeCatalog(
        store,
        miss_policy=settings.chain_miss_policy,
        default_max_results=settings.search_max_results,
    )


def build_refresher(store: CatalogStore, settings: Settings) -> CatalogRefresher:
    snapshot = SnapshotFile(settings.snapshot_path) if settings.snapshot_path else None
    source = GitHubNodeSource(
        api_base=settings.github_api_base,
        nodes_path=settings.github_nodes_path,
        branch=settings.github_branch,
        token=settings.github_token,
        rate_limiter=RateLimiter(settings.refresh_min_interval),
        timeout=settings.refresh_timeout,
    )
    return CatalogRefresher(store, source, snapshot=snapshot)
