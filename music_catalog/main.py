"""Music catalog service main application."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .api.albums import router as albums_router
from .api.artists import router as artists_router
from .api.health import router as health_router
from .api.playlists import router as playlists_router
from .api.songs import router as songs_router
from .auth import AuthStrategy, build_auth_strategy
from .config import Settings, app_settings
from .db.store import DocumentStore
from .logging import configure_logging, get_logger
from .metrics import METRICS_CONTENT_TYPE, get_metrics
from .middleware.correlation import CorrelationIDMiddleware
from .middleware.error_handler import register_exception_handlers
from .middleware.request_logging import RequestLoggingMiddleware

# Configure logging
configure_logging(log_level=app_settings.log_level, log_format=app_settings.log_format)
logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    auth: Optional[AuthStrategy] = None,
) -> FastAPI:
    """Build the application around an explicit store and auth strategy.

    A store passed in is used as-is and left open on shutdown; otherwise one is
    built from ``settings.database_url`` and connected during startup.
    """
    settings = settings or app_settings
    owns_store = store is None
    store = store or DocumentStore.from_url(settings.database_url, echo=settings.database_echo)
    auth = auth or build_auth_strategy(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect the document store on startup and dispose of it on shutdown."""
        logger.info("music_catalog_starting", version=settings.app_version, auth=auth.name)
        if owns_store:
            try:
                await store.connect()
            except Exception as e:
                logger.error("document_store_connect_failed", error=str(e))
                raise
        logger.info("music_catalog_started", version=settings.app_version)

        yield

        logger.info("music_catalog_shutting_down")
        if owns_store:
            await store.close()
        logger.info("music_catalog_shutdown")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Artists, albums, songs and playlists catalog service",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.auth = auth

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    # Added last so it wraps request logging and binds the id first
    app.add_middleware(CorrelationIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(artists_router, prefix=settings.api_prefix)
    app.include_router(albums_router, prefix=settings.api_prefix)
    app.include_router(songs_router, prefix=settings.api_prefix)
    app.include_router(playlists_router, prefix=settings.api_prefix)

    # Prometheus metrics endpoint
    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=get_metrics(), media_type=METRICS_CONTENT_TYPE)

    return app


app = create_app()


def run() -> None:
    """Console-script entry point."""
    import uvicorn

    uvicorn.run(
        "music_catalog.main:app",
        host=app_settings.host,
        port=app_settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
