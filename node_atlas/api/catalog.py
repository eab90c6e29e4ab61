"""Catalog discovery endpoints."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from node_atlas.catalog.errors import (
    CatalogNotLoadedError,
    ChainEntityNotFoundError,
    NotFoundError,
    RefreshUnavailableError,
)
from node_atlas.catalog.service import NodeCatalog
from node_atlas.ingest.refresher import CatalogRefresher
from node_atlas.models.catalog import (
    CatalogEntity,
    CatalogStatistics,
    ChainSuggestion,
    RefreshOutcome,
    SearchOptions,
    SearchResult,
    WorkflowIntent,
)

logger = structlog.get_logger()

router = APIRouter()


def get_catalog(request: Request) -> NodeCatalog:
    return request.app.state.catalog


def get_refresher(request: Request) -> Optional[CatalogRefresher]:
    return request.app.state.refresher


def _not_loaded(e: CatalogNotLoadedError) -> HTTPException:
    logger.error("catalog_not_loaded", operation=e.operation)
    return HTTPException(status_code=503, detail=str(e))


class SearchRequest(BaseModel):
    """Request to search the catalog."""

    query: str = Field(..., description="Free-text query; blank matches every node")
    options: SearchOptions = Field(default_factory=SearchOptions)


class CategoriesResponse(BaseModel):
    categories: list[str]


class ValidationResponse(BaseModel):
    valid: bool
    issues: list[str]


@router.get("/catalog/categories", response_model=CategoriesResponse)
def list_categories(catalog: NodeCatalog = Depends(get_catalog)) -> CategoriesResponse:
    try:
        return CategoriesResponse(categories=catalog.categories())
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)


@router.get("/catalog/categories/{label}/nodes", response_model=list[CatalogEntity])
def discover_by_category(label: str, catalog: NodeCatalog = Depends(get_catalog)) -> list[CatalogEntity]:
    """Nodes for a category group, alias or label fragment."""
    try:
        return catalog.discover_by_category(label)
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)


@router.get("/catalog/intents", response_model=list[CatalogEntity])
def discover_by_intent(
    phrase: str = Query(..., description="What the workflow should do, e.g. 'send notification'"),
    catalog: NodeCatalog = Depends(get_catalog),
) -> list[CatalogEntity]:
    try:
        return catalog.discover_by_intent(phrase)
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)


@router.post("/catalog/search", response_model=SearchResult)
def search_nodes(request: SearchRequest, catalog: NodeCatalog = Depends(get_catalog)) -> SearchResult:
    try:
        return catalog.search_nodes(request.query, request.options)
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)


@router.post("/catalog/chains", response_model=list[ChainSuggestion])
def suggest_chains(intent: WorkflowIntent, catalog: NodeCatalog = Depends(get_catalog)) -> list[ChainSuggestion]:
    try:
        return catalog.suggest_chains(intent)
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)
    except ChainEntityNotFoundError as e:
        logger.error("chain_entity_missing", display_name=e.display_name, suggestion=e.suggestion)
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/catalog/statistics", response_model=CatalogStatistics)
def statistics(catalog: NodeCatalog = Depends(get_catalog)) -> CatalogStatistics:
    try:
        return catalog.statistics()
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)


@router.get("/catalog/nodes/{identifier}", response_model=CatalogEntity)
def get_node(identifier: str, catalog: NodeCatalog = Depends(get_catalog)) -> CatalogEntity:
    try:
        return catalog.get_node(identifier)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)


@router.get("/catalog/validate", response_model=ValidationResponse)
def validate(catalog: NodeCatalog = Depends(get_catalog)) -> ValidationResponse:
    try:
        issues = catalog.validate()
    except CatalogNotLoadedError as e:
        raise _not_loaded(e)
    return ValidationResponse(valid=not issues, issues=issues)


@router.post("/catalog/refresh", response_model=RefreshOutcome)
async def refresh_catalog(
    force: bool = False,
    refresher: Optional[CatalogRefresher] = Depends(get_refresher),
) -> RefreshOutcome:
    """
    Refresh the catalog from the n8n repository.

    Falls back to the last good catalog when the source is unreachable;
    the outcome's status tells which happened.
    """
    if refresher is None:
        raise HTTPException(status_code=503, detail="Catalog refresh is not configured")

    try:
        outcome = await refresher.refresh(force=force)
    except RefreshUnavailableError as e:
        logger.error("catalog_refresh_unavailable", error=str(e), status_code=e.status_code)
        raise HTTPException(status_code=503, detail=str(e))

    logger.info("catalog_refresh_requested", status=outcome.status, revision=outcome.revision)
    return outcome
