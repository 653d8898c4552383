from tether_shared.database.engine import (
    AsyncSessionFactory,
    Base,
    StoreHandle,
    open_store,
)

__all__ = [
    "AsyncSessionFactory",
    "Base",
    "StoreHandle",
    "open_store",
]
