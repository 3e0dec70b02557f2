from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """A registered account; ``liked_lists`` mirrors ``Watchlist.likes``."""

    user_id: str
    username: str
    email: str = ""
    password_hash: str = ""
    liked_lists: tuple[str, ...] = ()
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved from a bearer token."""

    user_id: str
    username: str
