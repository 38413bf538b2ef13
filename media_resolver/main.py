"""
Media Resolver - FastAPI application entry point.

Resolves video identifiers into playable video/audio stream URLs and subtitle
tracks, and serves cached search, suggestion and trending listings on top of
a pluggable video-platform client.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .clients import load_client
from .config import get_settings
from .core.preferences import JsonPreferenceStore
from .routes.api import router
from .source import MediaSource

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_source() -> MediaSource | None:
    """Build the MediaSource from settings, or None when no client is configured."""
    settings = get_settings()
    if not settings.platform_client:
        logger.warning("No platform client configured (MEDIA_RESOLVER_PLATFORM_CLIENT is empty)")
        return None

    client = load_client(settings.platform_client)
    logger.info("Platform client loaded: %s", type(client).__name__)
    return MediaSource(client, JsonPreferenceStore(), settings)


def create_app(source: MediaSource | None = None) -> FastAPI:
    """
    Create the application. A prebuilt *source* is used as-is; otherwise one
    is built from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup and shutdown events."""
        logger.info("Media Resolver starting up...")

        settings = get_settings()
        logger.info(f"Debug mode: {settings.debug}")
        logger.info(
            "Cache bounds: manifests=%s listings=%s, fetch timeout %.1fs",
            settings.manifest_cache_size or "unbounded",
            settings.listing_cache_size or "unbounded",
            settings.fetch_timeout,
        )

        app.state.source = source if source is not None else build_source()

        yield

        logger.info("Media Resolver shutting down...")
        if app.state.source is not None:
            await app.state.source.aclose()

    app = FastAPI(
        title="Media Resolver",
        description=(
            "Resolves video identifiers into playable stream URLs and subtitle "
            "tracks, with cached search, suggestions and trending listings."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS: comma-separated explicit origins; empty = "*" without credentials
    origins = [o.strip() for o in get_settings().cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins if origins else ["*"],
        allow_credentials=bool(origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/", tags=["root"])
    async def root():
        return {
            "name": "Media Resolver",
            "version": "1.0.0",
            "docs": "/docs",
            "endpoints": {
                "playback": "/api/playback",
                "subtitles": "/api/subtitles",
                "search": "/api/search",
                "suggest": "/api/suggest",
                "trending": "/api/trending",
                "health": "/api/health",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "media_resolver.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
