import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from config.database import get_postgres_dsn

# `.env` is the primary dev config source and must win over the shell env,
# otherwise edits to `.env` silently do nothing.
load_dotenv(override=True)


def _get_env_int(key: str, default: int) -> int:
    """Read an integer env var; unset or empty falls back to the default."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean env var, accepting true/false/1/0/yes/no/on."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "y", "yes", "on"}


@dataclass(frozen=True)
class AppSettings:
    """Runtime configuration, built once at startup and passed to ``create_app``."""

    secret_key: str = "change_me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = 12
    postgres_dsn: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls(
            secret_key=os.getenv("SECRET_KEY", "").strip() or "change_me",
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256").strip() or "HS256",
            access_token_expire_minutes=_get_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24) or 60 * 24,
            bcrypt_rounds=_get_env_int("BCRYPT_ROUNDS", 12) or 12,
            postgres_dsn=get_postgres_dsn(),
            log_level=(os.getenv("LOG_LEVEL", "INFO").strip() or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


# ===== FastAPI / Uvicorn runtime =====

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _get_env_int("SERVER_PORT", 8000)
SERVER_RELOAD = _get_env_bool("SERVER_RELOAD", False)
SERVER_LOG_LEVEL = os.getenv("SERVER_LOG_LEVEL", "info")
SERVER_WORKERS = _get_env_int("SERVER_WORKERS", 1) or 1

UVICORN_CONFIG = {
    "host": SERVER_HOST,
    "port": SERVER_PORT,
    "reload": SERVER_RELOAD,
    "log_level": SERVER_LOG_LEVEL,
    "workers": SERVER_WORKERS,
}
