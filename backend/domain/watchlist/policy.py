from __future__ import annotations

from typing import Any, Iterable, Optional

from domain.watchlist.watchlist import Comment, Watchlist


def can_access_watchlist(watchlist: Watchlist, user_id: Optional[str]) -> bool:
    """Read/comment rule: public lists are open, private ones need owner or collaborator."""
    if watchlist.is_public:
        return True
    if not user_id:
        return False
    return user_id == watchlist.owner_user_id or user_id in watchlist.collaborators


def normalize_list_name(list_name: Any) -> str:
    """Trimmed name; anything that is not a string counts as blank."""
    return list_name.strip() if isinstance(list_name, str) else ""


def with_member(members: Iterable[str], member: str) -> tuple[str, ...]:
    out = tuple(members)
    if member in out:
        return out
    return out + (member,)


def without_member(members: Iterable[str], member: str) -> tuple[str, ...]:
    return tuple(m for m in members if m != member)


def find_comment(watchlist: Watchlist, comment_id: str) -> Optional[Comment]:
    for comment in watchlist.comments:
        if comment.comment_id == comment_id:
            return comment
    return None
