"""Async SQLAlchemy engine and session handling for SQLite and PostgreSQL."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from rolehex.core.config import get_settings
from rolehex.core.logging import get_logger

logger = get_logger(__name__)

SAMPLE_ROLE_NAMES = ("ADMIN", "USER", "MODERATOR")


class Base(DeclarativeBase):
    pass


class DatabaseManager:
    """Lazily builds the engine and session factory from settings."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            is_sqlite = self.settings.database_url.startswith("sqlite")
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                pool_size=self.settings.db_pool_size,
                max_overflow=self.settings.db_max_overflow,
                pool_timeout=self.settings.db_pool_timeout,
                pool_recycle=self.settings.db_pool_recycle,
                connect_args={"check_same_thread": False} if is_sqlite else {},
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
                pool_size=self.settings.db_pool_size,
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scope that rolls back uncommitted work if the block raises."""
        async with self.session_factory() as session:
            try:
                yield session
            except BaseException:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection check failed", error=str(e))
            return False


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db_manager().session() as session:
        yield session


async def init_database() -> None:
    """Check connectivity; in development also create tables and seed roles.

    Other environments are expected to run Alembic migrations.
    """
    from rolehex.infrastructure.persistence.models import RoleModel  # noqa: F401

    db = get_db_manager()
    settings = get_settings()

    if settings.database_url.startswith("sqlite"):
        # sqlite+aiosqlite:///path/to/file.db
        Path(settings.database_url.split(":///")[-1]).parent.mkdir(parents=True, exist_ok=True)

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    if settings.is_development:
        await db.create_tables()
        if settings.seed_sample_roles:
            await _seed_sample_roles(db)
    else:
        logger.info("Skipping table creation outside development, use migrations")


async def _seed_sample_roles(db: DatabaseManager) -> None:
    from rolehex.domain.entities import utc_now
    from rolehex.infrastructure.persistence.models import RoleModel

    async with db.session() as session:
        for name in SAMPLE_ROLE_NAMES:
            result = await session.execute(select(RoleModel).where(RoleModel.name == name))
            if result.scalar_one_or_none() is None:
                session.add(RoleModel(name=name, created_at=utc_now()))
                logger.info("Seeded sample role", role_name=name)

        await session.commit()


async def close_database() -> None:
    await get_db_manager().disconnect()
