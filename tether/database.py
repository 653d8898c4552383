from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from tether.config import Settings
from tether_shared.database import StoreHandle, open_store


def init_db(settings: Settings) -> StoreHandle:
    return open_store(settings.database_url, timeout=settings.store_timeout_seconds)


def get_store(request: Request) -> StoreHandle:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Database not initialized")
    return store


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    One session and one transaction per request; committed on success.

    Routes depend on this with ``scope="function"`` so the commit finishes
    before the response is sent and a failed commit reaches the error handlers.
    """
    factory = get_store(request).session_factory
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
