import logging

from fastapi import Request
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


def async_url(url: str) -> str:
    # Ensure we use the async driver
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url.replace("postgresql://", "postgresql+asyncpg://", 1)


class Database:
    """
    Owns the connection pool shared by every request.

    Built once by the application lifespan, handed to request handlers
    through the ``get_db`` dependency and disposed on shutdown.
    """

    def __init__(
        self,
        url: str,
        *,
        ssl: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        url = async_url(url)
        engine_kwargs = {"echo": echo}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )
            if ssl:
                engine_kwargs["connect_args"] = {"ssl": "require"}

        self.engine = create_async_engine(url, **engine_kwargs)

        # Async session factory
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    async def create_schema(self) -> None:
        # Importing the models registers their tables on Base.metadata
        from taskmaster.models import tasks, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized")

    async def current_time(self):
        async with self.session_factory() as db:
            result = await db.execute(select(func.now()))
            return result.scalar_one()

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection pool closed")


def get_database(request: Request) -> Database:
    return request.app.state.db


async def get_db(request: Request):
    async with get_database(request).session_factory() as db:
        try:
            yield db
        finally:
            await db.close()
