# pawsclinic/db/session.py

from __future__ import annotations

from pathlib import Path

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


# Declarative Base: all models inherit from this
class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the engine and session factory for the single-file SQLite store.
    Built once at startup and handed to whatever needs a session.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        # 1) Engine: one per app
        self.engine: AsyncEngine = create_async_engine(
            f"sqlite+aiosqlite:///{self.path}",
            pool_pre_ping=True,   # avoids stale connection errors
        )
        # 2) Session factory: creates short-lived sessions per operation
        self.sessionmaker = async_sessionmaker(
            self.engine,
            expire_on_commit=False,  # keep objects usable after commit
            class_=AsyncSession,
        )

    async def init(self) -> None:
        """Create the parent directory and all tables. Safe to call repeatedly."""
        # imports the models so Base.metadata is populated
        from pawsclinic.db.models import appointment  # noqa: F401

        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(sa.text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()
