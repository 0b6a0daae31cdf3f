# app/database/connection.py
import logging
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record) -> None:
    # SQLite's built-in lower() only folds ASCII; ILIKE is compiled to lower() LIKE lower()
    dbapi_connection.create_function("lower", 1, _unicode_lower)


class Database:
    """
    Storage client for the application.
    Owns the async engine and session factory; created once by the app
    factory and connected/disconnected by the lifespan handler.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self, create_tables: bool = True) -> None:
        if self.engine is not None:
            return

        self.engine = create_async_engine(self.url, echo=self.echo, pool_pre_ping=True)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _register_sqlite_functions)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

        if create_tables:
            # Make sure every model is registered on Base.metadata
            import app.model_registry  # noqa: F401

            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        logger.info(f"✅ Connected to database ({self.engine.url.get_backend_name()})")

    async def disconnect(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("🔌 Disconnected from database")

    async def session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError("Database is not connected")
        async with self.session_factory() as session:
            yield session


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield a per-request session from the app's storage client."""
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
