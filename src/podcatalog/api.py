"""FastAPI application serving the podcast catalog."""

import time

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from podcatalog import __version__
from podcatalog.config import Settings, get_settings
from podcatalog.storage import CatalogStore, StoreError

logger = structlog.get_logger(__name__)


def get_store(request: Request) -> CatalogStore:
    """Dependency returning the store the app was built with."""
    return request.app.state.store


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def health():
    """Liveness probe. Never touches the store."""
    return {"status": "ok"}


def list_podcasts(store: CatalogStore = Depends(get_store)):
    """List all podcasts, newest first."""
    try:
        podcasts = store.list_podcasts()
    except StoreError:
        logger.exception("Error fetching podcasts")
        return _failure(500, "Failed to fetch podcasts")

    return {
        "success": True,
        "data": [podcast.model_dump(mode="json") for podcast in podcasts],
    }


def get_podcast(podcast_id: str, store: CatalogStore = Depends(get_store)):
    """Get one podcast with its episodes."""
    try:
        podcast = store.get_podcast(podcast_id)
    except StoreError:
        logger.exception("Error fetching podcast", podcast_id=podcast_id)
        return _failure(500, "Failed to fetch podcast")

    if podcast is None:
        logger.info("Podcast not found", podcast_id=podcast_id)
        return _failure(404, "Podcast not found")

    return {"success": True, "data": podcast.model_dump(mode="json")}


async def log_requests(request: Request, call_next):
    """Log one line per request with its status and duration."""
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "Request handled",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response


def create_app(store: CatalogStore, settings: Settings | None = None) -> FastAPI:
    """Build the API around an already initialized store.

    Args:
        store: Catalog store every request reads from.
        settings: Application settings. Defaults to the cached environment settings.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Podcatalog",
        description="Read-only podcast catalog API",
        version=__version__,
        debug=settings.debug,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.add_api_route("/health", health, methods=["GET"])
    app.add_api_route("/api/podcasts", list_podcasts, methods=["GET"])
    app.add_api_route("/api/podcasts/{podcast_id}", get_podcast, methods=["GET"])

    return app
