"""Infrastructure resources: the relational database.

This module is part of the infra layer and must not import from application features.
"""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


class DatabaseResource:
    """Database resource for dependency injection."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def init(self):
        """Initialize database connection."""
        self.engine = create_async_engine(
            self.database_url,
            echo=False,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return self

    @property
    def dialect_name(self) -> str:
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.engine.dialect.name

    async def ping(self) -> None:
        """Apply session limits (PostgreSQL only) and verify connectivity."""
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        async with self.engine.begin() as conn:
            if self.dialect_name == "postgresql":
                await conn.execute(text("SET lock_timeout = '4s'"))
                await conn.execute(text("SET statement_timeout = '8s'"))
            await conn.execute(text("SELECT 1"))

    def get_session(self) -> AsyncSession:
        """Get database session (synchronous accessor)."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.session_factory()

    async def shutdown(self):
        """Shutdown database connection."""
        if self.engine:
            await self.engine.dispose()
