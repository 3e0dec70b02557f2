from __future__ import annotations

import logging
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI

from config.settings import UVICORN_CONFIG, AppSettings, configure_logging
from server.api.rest.dependencies import build_container, shutdown_dependencies
from server.api.rest.errors import register_exception_handlers
from server.api_router import api_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    settings = settings or AppSettings.from_env()
    if settings.secret_key == "change_me":
        logger.warning("SECRET_KEY is not set; using the insecure development default")

    app = FastAPI(title="Watchlist Social API", version="0.1.0")
    app.state.settings = settings
    app.state.container = build_container(settings)

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, Any]:
        return {"ok": True, "storage": "postgres" if settings.postgres_dsn else "in_memory"}

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await shutdown_dependencies(app.state.container)

    return app


app = create_app()


if __name__ == "__main__":
    configure_logging(app.state.settings.log_level)
    uvicorn.run("server.main:app", **UVICORN_CONFIG)
