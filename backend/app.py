"""FastAPI application entry point for the ThingSpeak proxy."""

import logging
import sys

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from errors import register_error_handlers
from services.cache import RecordCache
from services.resolver import FieldResolver
from services.thingspeak import ThingSpeakFetcher

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(config: Settings = settings, client: httpx.AsyncClient | None = None) -> FastAPI:
    """Build the app.

    ``client`` lets callers supply the upstream HTTP client; when omitted one
    is created here and closed on shutdown.
    """
    app = FastAPI(title="ThingSpeak Proxy", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request log + allow-all origin header even when the request has no Origin
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        response: Response = await call_next(request)
        if "*" in config.cors_origins:
            response.headers.setdefault("Access-Control-Allow-Origin", "*")
        return response

    # Centralized error handlers
    register_error_handlers(app)

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient()

    fetcher = ThingSpeakFetcher(
        client,
        base_url=config.thingspeak_base_url,
        max_attempts=config.upstream_max_attempts,
    )
    app.state.resolver = FieldResolver(RecordCache(), fetcher)

    from routes.health import router as health_router
    from routes.field import router as field_router

    app.include_router(health_router)
    app.include_router(field_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        problems = config.validate()
        if problems:
            logger.warning("Configuration problems: %s", "; ".join(problems))
        logger.info("ThingSpeak Proxy ready (commit %s, port %d)", config.git_sha, config.port)

    @app.on_event("shutdown")
    async def _close_client() -> None:
        if owns_client:
            await client.aclose()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
