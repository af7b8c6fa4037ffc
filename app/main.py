"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from app.alternatives.llm_client import OpenAIRankingClient, RankingClient
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.exceptions import (
    ExerciseNotFoundError,
    FeatureNotEntitledError,
    QuotaExceededError,
    StoreUnavailableError,
)
from app.db.session import build_engine

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_ranking_client() -> Optional[RankingClient]:
    """OpenAI client when an API key is configured, otherwise ``None`` (rule-based only)."""
    if not settings.OPENAI_API_KEY:
        logger.info("OPENAI_API_KEY not set, AI re-ranking disabled")
        return None
    return OpenAIRankingClient(
        settings.OPENAI_API_KEY,
        timeout=settings.AI_TIMEOUT_SECONDS,
        max_tokens=settings.AI_MAX_TOKENS,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                            content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(FeatureNotEntitledError)
    async def not_entitled_handler(request: Request, exc: FeatureNotEntitledError):
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN,
                            content={"detail": str(exc), "feature": exc.feature, "plan": exc.plan})

    @app.exception_handler(ExerciseNotFoundError)
    async def not_found_handler(request: Request, exc: ExerciseNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(QuotaExceededError)
    async def quota_handler(request: Request, exc: QuotaExceededError):
        return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                            content={"detail": str(exc), "tier": exc.tier, "used": exc.used, "limit": exc.limit})

    @app.exception_handler(StoreUnavailableError)
    async def store_handler(request: Request, exc: StoreUnavailableError):
        logger.error("Store unavailable on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content={"detail": "Internal server error"})

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content={"detail": "Internal server error"})


def create_app(engine: Optional[Engine] = None, ranking_client: Optional[RankingClient] = None) -> FastAPI:
    """
    Build the application.

    ``engine`` and ``ranking_client`` are created in the lifespan when not
    injected; injected ones are left for the caller to dispose.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_engine = engine is None
        owns_client = ranking_client is None
        app.state.engine = engine if engine is not None else build_engine(settings)
        app.state.ranking_client = ranking_client if ranking_client is not None else build_ranking_client()
        logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
        yield
        if owns_client and isinstance(app.state.ranking_client, OpenAIRankingClient):
            app.state.ranking_client.close()
        if owns_engine:
            app.state.engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Exercise alternatives with rule-based ranking and optional AI re-ranking.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Root endpoint - health check."""
        return {
            "message": "Spotter API",
            "version": settings.VERSION,
            "status": "healthy"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "service": "spotter-api",
            "version": settings.VERSION
        }

    return app


configure_logging()
app = create_app()
