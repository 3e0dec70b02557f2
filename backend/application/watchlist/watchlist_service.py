"""
Watchlist authorization and mutation service.

Owns every rule about who may read, update, like and comment on a watchlist,
and how like/comment state is merged back into the stored record. Storage,
identifier generation and the clock are injected so the service stays free of
infrastructure imports.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from application.ports.id_generator_port import IdGeneratorPort
from application.ports.user_store_port import UserStorePort
from application.ports.watchlist_store_port import WatchlistStorePort
from domain.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from domain.watchlist import (
    Comment,
    Watchlist,
    can_access_watchlist,
    find_comment,
    normalize_list_name,
    with_member,
    without_member,
)

logger = logging.getLogger(__name__)

LIKED = "liked"
UNLIKED = "unliked"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchlistService:
    """Create, update, like, comment on and read watchlists.

    Every operation fails fast with a ``domain.errors`` exception; the HTTP
    layer maps the error kind to a status code.
    """

    def __init__(
        self,
        *,
        watchlist_store: WatchlistStorePort,
        user_store: UserStorePort,
        id_generator: IdGeneratorPort,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._watchlists = watchlist_store
        self._users = user_store
        self._ids = id_generator
        self._clock = clock or _utcnow

    async def create_watchlist(self, *, owner_user_id: str, list_name: str) -> Watchlist:
        # Creation does not check for duplicate names; only renames do.
        name = normalize_list_name(list_name)
        if not name:
            raise ValidationError("List name cannot be empty.")
        watchlist = await self._watchlists.create_watchlist(owner_user_id=owner_user_id, list_name=name)
        logger.info("watchlist created list_id=%s owner=%s", watchlist.list_id, owner_user_id)
        return watchlist

    async def update_watchlist(
        self,
        *,
        user_id: str,
        list_id: str,
        list_name: Optional[str] = None,
        is_public: Any = None,
    ) -> Dict[str, Any]:
        """Rename and/or change visibility of a list the caller owns.

        ``None`` for ``list_name`` or ``is_public`` leaves that field
        untouched. ``is_public`` is taken raw so a non-boolean payload can be
        rejected here instead of being coerced upstream.
        """
        watchlist = await self._watchlists.get_watchlist_by_list_id(list_id=list_id)
        if watchlist is None:
            raise NotFoundError("WatchList not found")
        if watchlist.owner_user_id != user_id:
            raise AuthorizationError("Unauthorized: You can only update your own watchlist.")

        fields: Dict[str, Any] = {}
        if list_name is not None:
            name = normalize_list_name(list_name)
            if not name:
                raise ValidationError("List name cannot be empty.")
            same_name = await self._watchlists.get_watchlists_by_user_id_and_list_name(
                user_id=user_id,
                list_name=name,
            )
            if any(other.list_id != list_id for other in same_name or []):
                raise ConflictError("A watchlist with that name already exists!")
            fields["list_name"] = name

        if is_public is not None:
            if not isinstance(is_public, bool):
                raise ValidationError("isPublic must be a boolean.")
            fields["is_public"] = is_public

        updated = await self._watchlists.update_watchlist(list_id=list_id, fields=fields)
        logger.info("watchlist updated list_id=%s fields=%s", list_id, sorted(fields))
        return {"message": "Watchlist updated successfully", "watchlist": updated}

    async def like_watchlist(self, *, user_id: str, list_id: str) -> str:
        """Toggle the caller's like; returns ``"liked"`` or ``"unliked"``.

        ``watchlist.likes`` decides the toggle and ``user.liked_lists`` is set
        to mirror it, so a mirror left stale by an earlier failure is repaired
        here. The two writes are not transactional: if the user write fails the
        watchlist write is reverted before the error is re-raised.
        """
        user = await self._users.get_user_by_user_id(user_id=user_id)
        if user is None:
            raise NotFoundError("User could not be found")
        watchlist = await self._watchlists.get_watchlist_by_list_id(list_id=list_id)
        if watchlist is None:
            raise NotFoundError("Watchlist could not be found")

        if user_id in watchlist.likes:
            action = UNLIKED
            likes = without_member(watchlist.likes, user_id)
            liked_lists = without_member(user.liked_lists, list_id)
        else:
            action = LIKED
            likes = with_member(watchlist.likes, user_id)
            liked_lists = with_member(user.liked_lists, list_id)

        await self._watchlists.update_watchlist(list_id=list_id, fields={"likes": likes})
        try:
            await self._users.update_user(user_id=user_id, fields={"liked_lists": liked_lists})
        except Exception:
            logger.error("like toggle failed on user side, reverting list_id=%s user_id=%s", list_id, user_id)
            await self._watchlists.update_watchlist(list_id=list_id, fields={"likes": watchlist.likes})
            raise

        logger.info("watchlist %s list_id=%s user_id=%s", action, list_id, user_id)
        return action

    async def comment_on_watchlist(
        self,
        *,
        user_id: str,
        username: str,
        list_id: str,
        comment: Optional[str],
    ) -> Dict[str, Any]:
        text = (comment or "").strip() if isinstance(comment, str) else ""
        if not text:
            raise ValidationError("Comment cannot be empty.")

        watchlist = await self._watchlists.get_watchlist_by_list_id(list_id=list_id)
        if watchlist is None:
            raise NotFoundError("WatchList not found")
        if not can_access_watchlist(watchlist, user_id):
            raise AuthorizationError("Unauthorized: You cannot comment on this watchlist.")

        new_comment = Comment(
            comment_id=self._ids.new_id(),
            user_id=user_id,
            username=username,
            text=text,
            date_posted=self._clock(),
        )
        await self._watchlists.update_watchlist(
            list_id=list_id,
            fields={"comments": tuple(watchlist.comments) + (new_comment,)},
        )
        logger.info("comment added list_id=%s comment_id=%s", list_id, new_comment.comment_id)
        return {"message": "Comment added successfully", "comment": new_comment}

    async def delete_comment_on_watchlist(self, *, list_id: str, comment_id: str) -> Dict[str, Any]:
        # No ownership check: any caller that reaches this may delete any comment.
        watchlist = await self._watchlists.get_watchlist_by_list_id(list_id=list_id)
        if watchlist is None:
            raise NotFoundError("WatchList not found")
        if find_comment(watchlist, comment_id) is None:
            raise NotFoundError("Comment not found")

        remaining = tuple(c for c in watchlist.comments if c.comment_id != comment_id)
        updated = await self._watchlists.update_watchlist(list_id=list_id, fields={"comments": remaining})
        logger.info("comment deleted list_id=%s comment_id=%s", list_id, comment_id)
        return {"message": "Comment deleted successfully", "watchlist": updated}

    async def get_watchlist(self, *, user_id: Optional[str], list_id: str) -> Optional[Watchlist]:
        """Return the list if the caller may see it, ``None`` if not permitted.

        A missing list raises ``NotFoundError`` so callers can tell the two apart.
        """
        watchlist = await self._watchlists.get_watchlist_by_list_id(list_id=list_id)
        if watchlist is None:
            raise NotFoundError("WatchList not found")
        if not can_access_watchlist(watchlist, user_id):
            logger.info("watchlist read denied list_id=%s user_id=%s", list_id, user_id)
            return None
        return watchlist

    async def add_collaborator(
        self,
        *,
        owner_user_id: str,
        list_id: str,
        collaborator_user_id: str,
    ) -> Dict[str, Any]:
        watchlist = await self._get_owned(owner_user_id=owner_user_id, list_id=list_id)
        if collaborator_user_id == watchlist.owner_user_id:
            raise ValidationError("The owner cannot be a collaborator.")
        collaborator = await self._users.get_user_by_user_id(user_id=collaborator_user_id)
        if collaborator is None:
            raise NotFoundError("User could not be found")

        if collaborator_user_id not in watchlist.collaborators:
            watchlist = await self._watchlists.update_watchlist(
                list_id=list_id,
                fields={"collaborators": with_member(watchlist.collaborators, collaborator_user_id)},
            )
            logger.info("collaborator added list_id=%s user_id=%s", list_id, collaborator_user_id)
        return {"message": "Collaborator added successfully", "watchlist": watchlist}

    async def remove_collaborator(
        self,
        *,
        owner_user_id: str,
        list_id: str,
        collaborator_user_id: str,
    ) -> Dict[str, Any]:
        watchlist = await self._get_owned(owner_user_id=owner_user_id, list_id=list_id)
        if collaborator_user_id in watchlist.collaborators:
            watchlist = await self._watchlists.update_watchlist(
                list_id=list_id,
                fields={"collaborators": without_member(watchlist.collaborators, collaborator_user_id)},
            )
            logger.info("collaborator removed list_id=%s user_id=%s", list_id, collaborator_user_id)
        return {"message": "Collaborator removed successfully", "watchlist": watchlist}

    async def _get_owned(self, *, owner_user_id: str, list_id: str) -> Watchlist:
        watchlist = await self._watchlists.get_watchlist_by_list_id(list_id=list_id)
        if watchlist is None:
            raise NotFoundError("WatchList not found")
        if watchlist.owner_user_id != owner_user_id:
            raise AuthorizationError("Unauthorized: You can only update your own watchlist.")
        return watchlist
