"""
Engine e sessões async do SQLAlchemy.

- `get_db`: uma sessão por request (dependency do FastAPI); o commit
  fica a cargo do UnitOfWork.
- `background_session`: sessão própria para trabalho fora do request
  (handlers de audit log), trocável em testes.
"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.infrastructure.config import get_settings

settings = get_settings()

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_size=settings.DB_POOL_SIZE,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

_background_factory: async_sessionmaker = AsyncSessionLocal


class Base(DeclarativeBase):
    pass


def use_background_session_factory(factory: async_sessionmaker) -> None:
    global _background_factory
    _background_factory = factory


def background_session() -> AsyncSession:
    """O chamador gerencia commit e fechamento (`async with`)."""
    return _background_factory()


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
