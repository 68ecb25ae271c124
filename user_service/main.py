"""FastAPI application entry point with lifecycle management."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from .config import settings
from .db import create_pool, dispose_pool
from .logger import logger
from .middleware import (
    add_request_id_middleware,
    request_logging_middleware,
    security_headers_middleware,
)
from .monitoring import setup_monitoring
from .routes import limiter, router


# ==================== Application Lifecycle ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the database pool for the lifetime of the application."""
    logger.info(f"Starting {settings.APP_NAME} in {settings.APP_ENV} mode")
    app.state.db_pool = create_pool(settings)
    logger.info(f"{settings.APP_NAME} started - ready to accept requests")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await dispose_pool(app.state.db_pool)
    logger.info(f"{settings.APP_NAME} shutdown complete")


# ==================== Application Setup ====================

def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    # First registered = innermost layer for app.middleware("http")
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(add_request_id_middleware)

    # Signed cookie carrying the identity payload
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE,
        https_only=settings.SESSION_HTTPS_ONLY,
        same_site="lax",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(router)
    setup_monitoring(app)
    return app


app = create_app()
