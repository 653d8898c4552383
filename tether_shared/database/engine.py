from dataclasses import dataclass
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _timeout_kwargs(database_url: str, timeout: float) -> dict[str, Any]:
    """Driver-level connect/command timeouts so a dead store fails fast."""
    if _is_sqlite(database_url):
        return {"connect_args": {"timeout": timeout}}
    return {
        "connect_args": {"timeout": timeout, "command_timeout": timeout},
        "pool_timeout": timeout,
    }


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_async_engine(database_url: str, *, timeout: float = 10.0, **kwargs: Any) -> AsyncEngine:
    merged = {**_timeout_kwargs(database_url, timeout), **kwargs}
    if _is_sqlite(database_url):
        engine = create_async_engine(database_url, **merged)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_async_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        **merged,
    )


AsyncSessionFactory = async_sessionmaker[AsyncSession]


@dataclass
class StoreHandle:
    """Engine plus session factory; opened at startup, disposed at shutdown."""

    engine: AsyncEngine
    session_factory: AsyncSessionFactory

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()


def open_store(
    database_url: str,
    *,
    timeout: float = 10.0,
    expire_on_commit: bool = False,
    **engine_kwargs: Any,
) -> StoreHandle:
    engine = get_async_engine(database_url, timeout=timeout, **engine_kwargs)
    factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=expire_on_commit,
        autoflush=False,
        autocommit=False,
    )
    return StoreHandle(engine=engine, session_factory=factory)
