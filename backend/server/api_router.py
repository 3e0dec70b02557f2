from __future__ import annotations

from fastapi import APIRouter

import server.api.rest.v1.users as users_v1
import server.api.rest.v1.watchlists as watchlists_v1

# Canonical API router aggregator (v1 only).
api_router = APIRouter()
api_router.include_router(users_v1.router)
api_router.include_router(watchlists_v1.router)

__all__ = ["api_router"]
