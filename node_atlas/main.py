"""FastAPI application entry point."""
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from node_atlas import __version__
from node_atlas.api import catalog as catalog_api
from node_atlas.api import workflows as workflows_api
from node_atlas.catalog.errors import CatalogError
from node_atlas.catalog.service import NodeCatalog
from node_atlas.config import Settings, get_settings
from node_atlas.factory import build_catalog, build_refresher
from node_atlas.ingest.refresher import CatalogRefresher
from node_atlas.log_setup import configure_logging
from node_atlas.n8n.environments import EnvironmentRegistry

logger = structlog.get_logger()


def create_app(
    catalog: Optional[NodeCatalog] = None,
    refresher: Optional[CatalogRefresher] = None,
    environments: Optional[EnvironmentRegistry] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    catalog = catalog or build_catalog(settings)
    if refresher is None:
        refresher = build_refresher(catalog.store, settings)
    if environments is None:
        environments = EnvironmentRegistry.from_settings(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Discovery, search and chain suggestions over the n8n node catalog",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.catalog = catalog
    app.state.refresher = refresher
    app.state.environments = environments

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog_api.router, prefix="/api", tags=["catalog"])
    app.include_router(workflows_api.router, prefix="/api", tags=["workflows"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        store = app.state.catalog.store
        return {
            "status": "healthy" if store.is_loaded else "degraded",
            "version": __version__,
            "catalog_loaded": store.is_loaded,
            "catalog_revision": store.revision,
            "node_count": len(store),
            "environments": app.state.environments.names(),
        }

    @app.on_event("startup")
    async def startup_event():
        """Application startup handler."""
        if app.state.refresher is not None:
            try:
                app.state.refresher.restore()
            except CatalogError as e:
                logger.warning("snapshot_restore_failed", error=str(e))

        logger.info(
            "application_startup",
            app_name=settings.app_name,
            debug=settings.debug,
            node_count=len(app.state.catalog.store),
            catalog_revision=app.state.catalog.store.revision,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Application shutdown handler."""
        logger.info("application_shutdown")

    return app


app = create_app()
