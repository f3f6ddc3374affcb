"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis, database pool).
Middleware, CORS, exception handlers and routers all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sketchroom import __version__
from sketchroom.api import api_router
from sketchroom.config import settings
from sketchroom.exception_handlers import register_exception_handlers
from sketchroom.middleware.rate_limit import RateLimitMiddleware
from sketchroom.middleware.request_id import RequestIdMiddleware
from sketchroom.middleware.security import SecurityHeadersMiddleware
from sketchroom.redis_client import close_redis, init_redis

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "sketchroom.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    try:
        await init_redis()
        logger.info("sketchroom.redis_connected", url=settings.redis_url)
    except Exception as e:
        # Redis is optional, only rate limiting depends on it
        logger.warning("sketchroom.redis_unavailable", error=str(e))

    yield

    logger.info("sketchroom.shutdown")
    await close_redis()

    from sketchroom.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Sketchroom",
        description="Rooms, access grants and versioned diagrams for shared drawing",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: sketchroom.main:app)
app = create_app()
