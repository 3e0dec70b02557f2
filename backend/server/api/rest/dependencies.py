from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from application.ports.user_store_port import UserStorePort
from application.ports.watchlist_store_port import WatchlistStorePort
from application.users import UserService
from application.watchlist import WatchlistService
from config.settings import AppSettings
from domain.user import AuthenticatedUser
from infrastructure.ids import UuidIdGenerator
from infrastructure.persistence import build_user_store, build_watchlist_store
from infrastructure.security import BcryptPasswordHasher, JwtTokenCodec, bearer_token

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived adapters and services for one app instance."""

    settings: AppSettings
    watchlist_store: WatchlistStorePort
    user_store: UserStorePort
    token_codec: JwtTokenCodec
    watchlist_service: WatchlistService
    user_service: UserService


def build_container(settings: AppSettings) -> ServiceContainer:
    watchlist_store = build_watchlist_store(dsn=settings.postgres_dsn)
    user_store = build_user_store(dsn=settings.postgres_dsn)
    logger.info(
        "stores initialized backend=%s",
        "postgres" if settings.postgres_dsn else "in_memory",
    )
    return ServiceContainer(
        settings=settings,
        watchlist_store=watchlist_store,
        user_store=user_store,
        token_codec=JwtTokenCodec(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        ),
        watchlist_service=WatchlistService(
            watchlist_store=watchlist_store,
            user_store=user_store,
            id_generator=UuidIdGenerator(),
        ),
        user_service=UserService(
            user_store=user_store,
            password_hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
            watchlist_store=watchlist_store,
        ),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_watchlist_service(container: ServiceContainer = Depends(get_container)) -> WatchlistService:
    return container.watchlist_service


def get_user_service(container: ServiceContainer = Depends(get_container)) -> UserService:
    return container.user_service


def get_token_codec(container: ServiceContainer = Depends(get_container)) -> JwtTokenCodec:
    return container.token_codec


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    codec: JwtTokenCodec = Depends(get_token_codec),
) -> AuthenticatedUser:
    """Resolve the caller from ``Authorization: Bearer <token>``; 401 otherwise."""
    return codec.decode(bearer_token(authorization))


async def shutdown_dependencies(container: ServiceContainer) -> None:
    """Close store connection pools."""
    for store in (container.watchlist_store, container.user_store):
        close = getattr(store, "close", None)
        if callable(close):
            await close()
