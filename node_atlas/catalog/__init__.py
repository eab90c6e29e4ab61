"""Catalog store, discovery and search."""
from node_atlas.catalog.errors import (
    CatalogError,
    CatalogNotLoadedError,
    ChainEntityNotFoundError,
    DuplicateIdentifierError,
    MalformedEntityError,
    NotFoundError,
    RefreshUnavailableError,
)
from node_atlas.catalog.store import CatalogStore
from node_atlas.catalog.chains import ChainMissPolicy
from node_atlas.catalog.service import NodeCatalog

__all__ = [
    "CatalogError",
    "CatalogNotLoadedError",
    "ChainEntityNotFoundError",
    "DuplicateIdentifierError",
    "MalformedEntityError",
    "NotFoundError",
    "RefreshUnavailableError",
    "CatalogStore",
    "ChainMissPolicy",
    "NodeCatalog",
]
