from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Comment:
    """A comment embedded in a watchlist, in posting order."""

    comment_id: str
    user_id: str
    username: str
    text: str
    date_posted: datetime


@dataclass(frozen=True)
class Watchlist:
    """A named, owner-scoped list with visibility, likes and comments.

    ``collaborators`` and ``likes`` behave as sets (no duplicates) but keep
    insertion order so API output is stable.
    """

    list_id: str
    owner_user_id: str
    list_name: str
    is_public: bool = False
    collaborators: tuple[str, ...] = ()
    likes: tuple[str, ...] = ()
    comments: tuple[Comment, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
