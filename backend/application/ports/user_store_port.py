from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from domain.user import User


class UserStorePort(Protocol):
    async def get_user_by_user_id(self, *, user_id: str) -> Optional[User]:
        ...

    async def get_user_by_username(self, *, username: str) -> Optional[User]:
        ...

    async def create_user(self, *, username: str, email: str, password_hash: str) -> User:
        ...

    async def update_user(self, *, user_id: str, fields: Dict[str, Any]) -> User:
        """Partial update; supported keys: liked_lists, password_hash."""
        ...

    async def delete_user(self, *, user_id: str) -> bool:
        ...

    async def close(self) -> None:
        ...
