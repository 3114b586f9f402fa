"""
FastAPI application entry point.
Mount routes, middleware (Prometheus), startup events (ES index), error mapping.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from news_api.cache.redis_client import close_redis
from news_api.config import get_settings
from news_api.api.v1.router import api_router
from news_api.core.exceptions import JobAlreadyRunningError, NewsServiceError
from news_api.search.elasticsearch_client import close_elasticsearch, ensure_news_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure Elasticsearch index when ES is available."""
    try:
        await ensure_news_index()
    except Exception as e:
        # ES may be down; listing still works, search and search reindex fail with 500
        logger.warning("Could not ensure Elasticsearch index at startup: %s", e)
    yield
    await close_elasticsearch()
    await close_redis()


async def news_service_error_handler(request: Request, exc: NewsServiceError) -> JSONResponse:
    """Cause is already logged by the service; clients get the fixed per-operation message."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message},
    )


async def job_running_handler(request: Request, exc: JobAlreadyRunningError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        description="News articles REST API: listing, seeding, reindexing and Elasticsearch full-text search.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.add_exception_handler(NewsServiceError, news_service_error_handler)
    app.add_exception_handler(JobAlreadyRunningError, job_running_handler)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
