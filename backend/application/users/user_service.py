from __future__ import annotations

import logging
from typing import Optional

from application.ports.password_hasher_port import PasswordHasherPort
from application.ports.user_store_port import UserStorePort
from application.ports.watchlist_store_port import WatchlistStorePort
from domain.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from domain.user import User
from domain.watchlist import without_member

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


class UserService:
    """Account lifecycle: register, authenticate, change password, delete."""

    def __init__(
        self,
        *,
        user_store: UserStorePort,
        password_hasher: PasswordHasherPort,
        watchlist_store: Optional[WatchlistStorePort] = None,
    ) -> None:
        self._users = user_store
        self._hasher = password_hasher
        self._watchlists = watchlist_store

    async def create_user(self, *, username: str, email: str, password: str) -> User:
        username_s = _clean(username)
        email_s = _clean(email)
        if not username_s or not email_s or not _clean(password):
            raise ValidationError("Username, email and password required")
        if "@" not in email_s:
            raise ValidationError("Invalid email address.")
        if await self._users.get_user_by_username(username=username_s) is not None:
            raise ConflictError("Username already exists")

        user = await self._users.create_user(
            username=username_s,
            email=email_s,
            password_hash=self._hasher.hash(password),
        )
        logger.info("user registered user_id=%s", user.user_id)
        return user

    async def authenticate(self, *, username: str, password: str) -> User:
        user = await self._users.get_user_by_username(username=_clean(username))
        # Same message for unknown user and bad password.
        if user is None or not password or not self._hasher.verify(password, user.password_hash):
            raise AuthenticationError("Invalid username or password")
        return user

    async def get_user(self, *, user_id: str) -> User:
        user = await self._users.get_user_by_user_id(user_id=user_id)
        if user is None:
            raise NotFoundError("User could not be found")
        return user

    async def change_password(self, *, user_id: str, password: str) -> User:
        if not _clean(password):
            raise ValidationError("Password is missing")
        user = await self._users.get_user_by_user_id(user_id=user_id)
        if user is None:
            raise NotFoundError("User could not be found")
        updated = await self._users.update_user(
            user_id=user_id,
            fields={"password_hash": self._hasher.hash(password)},
        )
        logger.info("password changed user_id=%s", user_id)
        return updated

    async def delete_user(self, *, user_id: str) -> None:
        """Remove the account and withdraw its likes.

        Collaborator entries and authored comments stay on the lists; the
        store has no reverse index to find them.
        """
        user = await self._users.get_user_by_user_id(user_id=user_id)
        if user is None:
            raise NotFoundError("User could not be found")
        if self._watchlists is not None:
            await self._withdraw_likes(user)

        deleted = await self._users.delete_user(user_id=user_id)
        if not deleted:
            raise NotFoundError("User could not be found")
        logger.info("user deleted user_id=%s", user_id)

    async def _withdraw_likes(self, user: User) -> None:
        for list_id in user.liked_lists:
            watchlist = await self._watchlists.get_watchlist_by_list_id(list_id=list_id)
            if watchlist is None or user.user_id not in watchlist.likes:
                continue
            await self._watchlists.update_watchlist(
                list_id=list_id,
                fields={"likes": without_member(watchlist.likes, user.user_id)},
            )
            logger.info("like withdrawn list_id=%s user_id=%s", list_id, user.user_id)
