"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Store engine and session factory
- Application metadata

Run with:
    uvicorn shortlinks.main:app --port 5000

Design Decisions:
- create_app() takes a Settings object; everything that needs configuration
  (base address, code length, store URL) reads it from app.state
- The store is checked during startup; an unreachable store or a missing
  DATABASE_URL aborts the process instead of failing per request
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlinks import __version__
from shortlinks.api import endpoints
from shortlinks.api.schemas import HealthResponse
from shortlinks.core.logging_config import setup_logging
from shortlinks.core.setting import Settings, get_settings
from shortlinks.db.session import create_engine_for_url, create_session_maker, init_db
from shortlinks.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the store before serving; release connections on shutdown."""
    try:
        await init_db(app.state.engine)
    except Exception:
        logger.critical("Could not connect to the store, refusing to start", exc_info=True)
        raise

    logger.info("Short URLs will be served from %s", app.state.settings.BASE_URL)
    yield

    await app.state.engine.dispose()


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are a client error (400), not 422."""
    fields = {str(error["loc"][-1]) for error in exc.errors() if error.get("loc")}
    if fields == {"title"}:
        detail = "title must be a string"
    else:
        detail = "originalUrl is required"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration to use; read from the environment when omitted
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Shortlinks",
        description="URL shortening service with click tracking",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine_for_url(settings.DATABASE_URL)
    app.state.session_maker = create_session_maker(app.state.engine)

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints defined before router to match before catch-all route
    @app.get("/", tags=["Health"])
    async def root():
        return {
            "message": "Shortlinks",
            "version": __version__,
            "docs": "/docs"
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        return HealthResponse(status="healthy")

    app.include_router(endpoints.router, tags=["Links"])

    return app


app = create_app()
