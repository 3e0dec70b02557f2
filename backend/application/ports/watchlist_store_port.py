from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from domain.watchlist import Watchlist


class WatchlistStorePort(Protocol):
    async def get_watchlist_by_list_id(self, *, list_id: str) -> Optional[Watchlist]:
        ...

    async def get_watchlists_by_user_id_and_list_name(
        self,
        *,
        user_id: str,
        list_name: str,
    ) -> List[Watchlist]:
        """Exact-name lookup within one owner's lists."""
        ...

    async def create_watchlist(self, *, owner_user_id: str, list_name: str) -> Watchlist:
        ...

    async def update_watchlist(self, *, list_id: str, fields: Dict[str, Any]) -> Watchlist:
        """Partial update; ``fields`` keys are Watchlist attribute names.

        Supported: list_name, is_public, collaborators, likes, comments.
        """
        ...

    async def close(self) -> None:
        ...
