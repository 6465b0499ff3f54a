import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .auth import CallerPolicy
from .config import ServerConfig
from .errors import AddressDiscoveryError, ListingError
from .listing import create_listing_router
from .netinfo import get_local_ips
from .static import VideoFiles

logger = logging.getLogger(__name__)


def create_app(config: ServerConfig, policy: CallerPolicy | None = None) -> FastAPI:
    app = FastAPI(title="Video Page", version=__version__,
                  docs_url=None, redoc_url=None, openapi_url=None)

    # ---------- errors ----------
    @app.exception_handler(ListingError)
    async def listing_error(request: Request, exc: ListingError):
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code,
                                 headers=getattr(exc, "headers", None))

    # ---------- files ----------
    # Mounted before the listing router so its catch-all never shadows it
    app.mount(
        config.static_prefix,
        VideoFiles(directory=config.serving_root, allow_subpaths=config.allow_subpaths),
        name="videos",
    )

    # The mount only matches "<prefix>/..."; send the bare prefix there
    mount_root = config.static_prefix.rstrip("/")

    @app.api_route(mount_root, methods=["GET", "HEAD"], include_in_schema=False)
    def videos_slash():
        return RedirectResponse(mount_root + "/", status_code=307)

    # ---------- listing ----------
    app.include_router(create_listing_router(config, policy))
    return app


def build_app() -> FastAPI:
    return create_app(ServerConfig.from_env())


def log_local_ips():
    try:
        ips = get_local_ips()
    except AddressDiscoveryError as e:
        logger.warning("Could not list local addresses: %s", e)
        return []
    logger.info("Local addresses: %s", ", ".join(ips) or "none")
    return ips


def run(config: ServerConfig, log_level: str = "info"):
    """Start serving; uvicorn exits the process if it cannot bind."""
    app = create_app(config)
    log_local_ips()
    logger.info("Serving %s at %s", config.serving_root.resolve(), config.static_prefix)
    logger.info("Server started on %s:%d", config.host, config.port)
    server = uvicorn.Server(uvicorn.Config(app, host=config.host, port=config.port,
                                           log_level=log_level))
    server.run()

# python -m uvicorn video_page.main:build_app --factory --host 0.0.0.0 --port 8080
