from __future__ import annotations

from typing import Optional

from application.ports.user_store_port import UserStorePort
from application.ports.watchlist_store_port import WatchlistStorePort
from infrastructure.persistence.postgres.user_store import InMemoryUserStore, PostgresUserStore
from infrastructure.persistence.postgres.watchlist_store import (
    InMemoryWatchlistStore,
    PostgresWatchlistStore,
)


def build_watchlist_store(*, dsn: Optional[str]) -> WatchlistStorePort:
    """Factory used by server DI."""
    if dsn:
        return PostgresWatchlistStore(dsn=dsn)
    return InMemoryWatchlistStore()


def build_user_store(*, dsn: Optional[str]) -> UserStorePort:
    if dsn:
        return PostgresUserStore(dsn=dsn)
    return InMemoryUserStore()
