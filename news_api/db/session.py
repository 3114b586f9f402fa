"""
Async database engine and session factory.
Challenge: Connection pooling, short-lived sessions, proper cleanup.
Design: Repositories receive the session factory and open one session per call,
so each bulk write commits on its own and concurrent reads never share a session.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from news_api.config import get_settings

settings = get_settings()

# Async engine with connection pool (scalability)
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,  # Verify connections before use
    pool_size=10,
    max_overflow=20,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def create_worker_engine() -> AsyncEngine:
    """Engine without pooling for Celery tasks (each task runs its own event loop)."""
    return create_async_engine(settings.database_url, echo=settings.debug, poolclass=NullPool)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Shared session factory. Used as FastAPI dependency."""
    return async_session_maker
