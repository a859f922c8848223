"""FastAPI application entry point for the Parliament Watch API."""

import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers
from services.cache import TTLCache
from services.durable_cache import DurableCache
from services.openparliament import OpenParliamentClient
from services.resources import ResourceCache
from services.voting_history import VotingHistoryService

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


def _lifespan(http_transport: httpx.AsyncBaseTransport | None, database_url: str | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        missing = settings.validate()
        if missing:
            logger.warning("Invalid env vars (upstream calls may fail): %s", ", ".join(missing))

        durable_cache = DurableCache(database_url or settings.database_url)
        await durable_cache.startup()
        await durable_cache.purge_expired()

        http = httpx.AsyncClient(transport=http_transport)
        client = OpenParliamentClient(http)

        app.state.durable_cache = durable_cache
        app.state.resources = ResourceCache(client, durable_cache)
        app.state.voting_history = VotingHistoryService(client, TTLCache())
        try:
            yield
        finally:
            await http.aclose()
            await durable_cache.shutdown()

    return lifespan


def create_app(
    http_transport: httpx.AsyncBaseTransport | None = None,
    database_url: str | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Parliament Watch API",
        version="1.0.0",
        lifespan=_lifespan(http_transport, database_url),
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.members import router as members_router

    app.include_router(health_router)
    app.include_router(members_router)

    return app


app = create_app()
