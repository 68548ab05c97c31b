from typing import AsyncIterator, Dict

from fastapi import Request
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Database:
    """
    Owns the async engine and session factory for one process.

    Built in the application lifespan and disposed on shutdown; request
    handlers reach it through the ``get_db`` dependency.
    """

    def __init__(self, database_url: str, echo: bool = False):
        # Configure connection arguments based on database type
        # Supabase/PostgreSQL with PgBouncer needs statement_cache_size=0
        # SQLite doesn't support these parameters
        engine_kwargs = {"echo": echo}
        if "postgresql" in database_url:
            engine_kwargs.update(
                connect_args={
                    "statement_cache_size": 0,
                    "prepared_statement_cache_size": 0,
                },
                pool_pre_ping=True,  # Verify connections before use
                pool_recycle=300,    # Recycle connections every 5 minutes
                pool_size=20,
                max_overflow=30,
            )

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        self.session_maker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def init_models(self) -> None:
        """Create any missing tables."""
        # Register models on Base.metadata
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def check_tables(self) -> Dict[str, bool]:
        """Report whether the CRM tables exist in the connected database."""
        async with self.engine.connect() as conn:
            names = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        return {table: table in names for table in ("candidates", "notes")}

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.db
    async with database.session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
