from domain.watchlist.policy import (
    can_access_watchlist,
    find_comment,
    normalize_list_name,
    with_member,
    without_member,
)
from domain.watchlist.watchlist import Comment, Watchlist

__all__ = [
    "Comment",
    "Watchlist",
    "can_access_watchlist",
    "find_comment",
    "normalize_list_name",
    "with_member",
    "without_member",
]
