from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from application.ports.user_store_port import UserStorePort
from domain.user import User

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"liked_lists", "password_hash"})
_COLUMNS = "user_id, username, email, password_hash, liked_lists, created_at"


def _check_fields(fields: Dict[str, Any]) -> None:
    unknown = set(fields) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"unsupported user field(s): {', '.join(sorted(unknown))}")


class InMemoryUserStore(UserStorePort):
    def __init__(self) -> None:
        self._by_id: dict[str, User] = {}

    async def get_user_by_user_id(self, *, user_id: str) -> Optional[User]:
        return self._by_id.get(str(user_id))

    async def get_user_by_username(self, *, username: str) -> Optional[User]:
        for user in self._by_id.values():
            if user.username == username:
                return user
        return None

    async def create_user(self, *, username: str, email: str, password_hash: str) -> User:
        if await self.get_user_by_username(username=username) is not None:
            raise ValueError(f"username already taken: {username}")
        user = User(
            user_id=str(uuid4()),
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self._by_id[user.user_id] = user
        return user

    async def update_user(self, *, user_id: str, fields: Dict[str, Any]) -> User:
        _check_fields(fields)
        current = self._by_id.get(str(user_id))
        if current is None:
            raise ValueError(f"user not found: {user_id}")
        changes = dict(fields)
        if "liked_lists" in changes:
            changes["liked_lists"] = tuple(changes["liked_lists"])
        updated = replace(current, **changes)
        self._by_id[updated.user_id] = updated
        return updated

    async def delete_user(self, *, user_id: str) -> bool:
        return self._by_id.pop(str(user_id), None) is not None

    async def close(self) -> None:
        return None


class PostgresUserStore(UserStorePort):
    """Postgres-backed user storage (asyncpg)."""

    def __init__(
        self,
        *,
        dsn: str,
        min_size: int = 1,
        max_size: int = 5,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self):
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is not None:
                return self._pool
            import asyncpg  # type: ignore

            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
            )
            await self._ensure_schema()
            logger.info("PostgreSQL user store pool initialized")
            return self._pool

    async def _ensure_schema(self) -> None:
        pool = self._pool
        if pool is None:
            return
        async with pool.acquire() as conn:
            try:
                await conn.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto";')
            except Exception as e:
                logger.warning("Failed to ensure pgcrypto extension: %s", e)
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    user_id text PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    username text NOT NULL UNIQUE,
                    email text NOT NULL,
                    password_hash text NOT NULL,
                    liked_lists jsonb NOT NULL DEFAULT '[]'::jsonb,
                    created_at timestamptz NOT NULL DEFAULT NOW()
                );
                """
            )

    @staticmethod
    def _row_to_user(row: dict) -> User:
        liked = row.get("liked_lists") or []
        if isinstance(liked, str):
            try:
                liked = json.loads(liked)
            except ValueError:
                liked = []
        if not isinstance(liked, list):
            liked = []
        return User(
            user_id=str(row["user_id"]),
            username=str(row.get("username") or ""),
            email=str(row.get("email") or ""),
            password_hash=str(row.get("password_hash") or ""),
            liked_lists=tuple(str(v) for v in liked),
            created_at=row.get("created_at"),
        )

    async def get_user_by_user_id(self, *, user_id: str) -> Optional[User]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {_COLUMNS} FROM users WHERE user_id = $1;", str(user_id))
        return self._row_to_user(dict(row)) if row else None

    async def get_user_by_username(self, *, username: str) -> Optional[User]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {_COLUMNS} FROM users WHERE username = $1;", str(username))
        return self._row_to_user(dict(row)) if row else None

    async def create_user(self, *, username: str, email: str, password_hash: str) -> User:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO users (username, email, password_hash)
                VALUES ($1, $2, $3)
                RETURNING {_COLUMNS};
                """,
                username,
                email,
                password_hash,
            )
        assert row is not None
        return self._row_to_user(dict(row))

    async def update_user(self, *, user_id: str, fields: Dict[str, Any]) -> User:
        _check_fields(fields)
        if not fields:
            user = await self.get_user_by_user_id(user_id=user_id)
            if user is None:
                raise ValueError(f"user not found: {user_id}")
            return user

        params: list[Any] = [str(user_id)]
        assignments: list[str] = []
        if "liked_lists" in fields:
            params.append(json.dumps([str(v) for v in fields["liked_lists"]]))
            assignments.append(f"liked_lists = ${len(params)}::jsonb")
        if "password_hash" in fields:
            params.append(str(fields["password_hash"]))
            assignments.append(f"password_hash = ${len(params)}")

        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"UPDATE users SET {', '.join(assignments)} WHERE user_id = $1 RETURNING {_COLUMNS};",
                *params,
            )
        if row is None:
            raise ValueError(f"user not found: {user_id}")
        return self._row_to_user(dict(row))

    async def delete_user(self, *, user_id: str) -> bool:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow("DELETE FROM users WHERE user_id = $1 RETURNING user_id;", str(user_id))
        return bool(row)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
        self._pool = None
