from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from application.ports.watchlist_store_port import WatchlistStorePort
from domain.watchlist import Comment, Watchlist

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"list_name", "is_public", "collaborators", "likes", "comments"})
_JSON_FIELDS = frozenset({"collaborators", "likes", "comments"})
_COLUMNS = "list_id, owner_user_id, list_name, is_public, collaborators, likes, comments, created_at, updated_at"


def _check_fields(fields: Dict[str, Any]) -> None:
    unknown = set(fields) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"unsupported watchlist field(s): {', '.join(sorted(unknown))}")


def _comment_to_json(comment: Comment) -> Dict[str, Any]:
    return {
        "comment_id": comment.comment_id,
        "user_id": comment.user_id,
        "username": comment.username,
        "text": comment.text,
        "date_posted": comment.date_posted.isoformat() if comment.date_posted else None,
    }


def _comment_from_json(raw: Dict[str, Any]) -> Comment:
    posted = raw.get("date_posted")
    if isinstance(posted, str):
        posted = datetime.fromisoformat(posted)
    return Comment(
        comment_id=str(raw.get("comment_id") or ""),
        user_id=str(raw.get("user_id") or ""),
        username=str(raw.get("username") or ""),
        text=str(raw.get("text") or ""),
        date_posted=posted,
    )


def _load_json_list(value: Any) -> list:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            value = []
    return list(value) if isinstance(value, list) else []


def _field_to_db(name: str, value: Any) -> Any:
    if name == "comments":
        return json.dumps([_comment_to_json(c) for c in value], ensure_ascii=False)
    if name in _JSON_FIELDS:
        return json.dumps([str(v) for v in value], ensure_ascii=False)
    if name == "is_public":
        return bool(value)
    return str(value)


class InMemoryWatchlistStore(WatchlistStorePort):
    """Dict-backed store for dev/tests when Postgres is not configured."""

    def __init__(self) -> None:
        self._by_id: dict[str, Watchlist] = {}

    async def get_watchlist_by_list_id(self, *, list_id: str) -> Optional[Watchlist]:
        return self._by_id.get(str(list_id))

    async def get_watchlists_by_user_id_and_list_name(
        self,
        *,
        user_id: str,
        list_name: str,
    ) -> List[Watchlist]:
        return [
            w
            for w in self._by_id.values()
            if w.owner_user_id == str(user_id) and w.list_name == list_name
        ]

    async def create_watchlist(self, *, owner_user_id: str, list_name: str) -> Watchlist:
        now = datetime.now(timezone.utc)
        watchlist = Watchlist(
            list_id=str(uuid4()),
            owner_user_id=str(owner_user_id),
            list_name=list_name,
            created_at=now,
            updated_at=now,
        )
        self._by_id[watchlist.list_id] = watchlist
        return watchlist

    async def update_watchlist(self, *, list_id: str, fields: Dict[str, Any]) -> Watchlist:
        _check_fields(fields)
        current = self._by_id.get(str(list_id))
        if current is None:
            raise ValueError(f"watchlist not found: {list_id}")
        # Touches updated_at even with no fields, as the SQL UPDATE does.
        changes = dict(fields)
        for name in _JSON_FIELDS & set(changes):
            changes[name] = tuple(changes[name])
        updated = replace(current, updated_at=datetime.now(timezone.utc), **changes)
        self._by_id[updated.list_id] = updated
        return updated

    async def close(self) -> None:
        return None


class PostgresWatchlistStore(WatchlistStorePort):
    """Postgres-backed watchlist storage (asyncpg).

    Sets and the comment sequence are stored as JSONB arrays on the list row,
    so a single UPDATE persists a whole like/comment mutation.
    """

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
            logger.info("PostgreSQL watchlist store pool initialized")
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
                CREATE TABLE IF NOT EXISTS watchlists (
                    list_id text PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    owner_user_id text NOT NULL,
                    list_name text NOT NULL,
                    is_public boolean NOT NULL DEFAULT false,
                    collaborators jsonb NOT NULL DEFAULT '[]'::jsonb,
                    likes jsonb NOT NULL DEFAULT '[]'::jsonb,
                    comments jsonb NOT NULL DEFAULT '[]'::jsonb,
                    created_at timestamptz NOT NULL DEFAULT NOW(),
                    updated_at timestamptz NOT NULL DEFAULT NOW()
                );
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS watchlists_owner_name_idx ON watchlists(owner_user_id, list_name);"
            )

    @staticmethod
    def _row_to_watchlist(row: dict) -> Watchlist:
        return Watchlist(
            list_id=str(row["list_id"]),
            owner_user_id=str(row.get("owner_user_id") or ""),
            list_name=str(row.get("list_name") or ""),
            is_public=bool(row.get("is_public")),
            collaborators=tuple(str(v) for v in _load_json_list(row.get("collaborators"))),
            likes=tuple(str(v) for v in _load_json_list(row.get("likes"))),
            comments=tuple(
                _comment_from_json(c) for c in _load_json_list(row.get("comments")) if isinstance(c, dict)
            ),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    async def get_watchlist_by_list_id(self, *, list_id: str) -> Optional[Watchlist]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM watchlists WHERE list_id = $1;",
                str(list_id),
            )
        return self._row_to_watchlist(dict(row)) if row else None

    async def get_watchlists_by_user_id_and_list_name(
        self,
        *,
        user_id: str,
        list_name: str,
    ) -> List[Watchlist]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM watchlists WHERE owner_user_id = $1 AND list_name = $2 ORDER BY created_at;",
                str(user_id),
                list_name,
            )
        return [self._row_to_watchlist(dict(r)) for r in rows]

    async def create_watchlist(self, *, owner_user_id: str, list_name: str) -> Watchlist:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO watchlists (owner_user_id, list_name)
                VALUES ($1, $2)
                RETURNING {_COLUMNS};
                """,
                str(owner_user_id),
                list_name,
            )
        assert row is not None
        return self._row_to_watchlist(dict(row))

    async def update_watchlist(self, *, list_id: str, fields: Dict[str, Any]) -> Watchlist:
        _check_fields(fields)
        params: list[Any] = [str(list_id)]
        assignments: list[str] = []
        for name in sorted(fields):
            params.append(_field_to_db(name, fields[name]))
            cast = "::jsonb" if name in _JSON_FIELDS else ""
            assignments.append(f"{name} = ${len(params)}{cast}")
        assignments.append("updated_at = NOW()")

        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"UPDATE watchlists SET {', '.join(assignments)} WHERE list_id = $1 RETURNING {_COLUMNS};",
                *params,
            )
        if row is None:
            raise ValueError(f"watchlist not found: {list_id}")
        return self._row_to_watchlist(dict(row))

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
        self._pool = None
