import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from config.database import get_postgres_dsn
from config.settings import AppSettings

_DB_KEYS = ("POSTGRES_DSN", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB")
_APP_KEYS = ("SECRET_KEY", "JWT_ALGORITHM", "ACCESS_TOKEN_EXPIRE_MINUTES", "BCRYPT_ROUNDS", "LOG_LEVEL")


def _clean_env(**values: str) -> dict:
    env = {k: v for k, v in os.environ.items() if k not in _DB_KEYS + _APP_KEYS}
    env.update(values)
    return env


class TestAppSettings(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, _clean_env(), clear=True):
            settings = AppSettings.from_env()

        self.assertEqual(settings.secret_key, "change_me")
        self.assertEqual(settings.jwt_algorithm, "HS256")
        self.assertEqual(settings.access_token_expire_minutes, 1440)
        self.assertEqual(settings.bcrypt_rounds, 12)
        self.assertIsNone(settings.postgres_dsn)
        self.assertEqual(settings.log_level, "INFO")

    def test_values_from_env(self):
        env = _clean_env(
            SECRET_KEY="s3cret",
            ACCESS_TOKEN_EXPIRE_MINUTES="30",
            BCRYPT_ROUNDS="10",
            LOG_LEVEL="debug",
            POSTGRES_DSN="postgresql://u:p@db:5432/app",
        )
        with patch.dict(os.environ, env, clear=True):
            settings = AppSettings.from_env()

        self.assertEqual(settings.secret_key, "s3cret")
        self.assertEqual(settings.access_token_expire_minutes, 30)
        self.assertEqual(settings.bcrypt_rounds, 10)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.postgres_dsn, "postgresql://u:p@db:5432/app")

    def test_bad_integer_is_reported(self):
        with patch.dict(os.environ, _clean_env(BCRYPT_ROUNDS="lots"), clear=True):
            with self.assertRaises(ValueError):
                AppSettings.from_env()


class TestPostgresDsn(unittest.TestCase):
    def test_dsn_from_parts(self):
        env = _clean_env(POSTGRES_HOST="db", POSTGRES_USER="app", POSTGRES_PASSWORD="pw")
        with patch.dict(os.environ, env, clear=True):
            self.assertEqual(get_postgres_dsn(), "postgresql://app:pw@db:5432/watchlist_social")

    def test_no_host_means_in_memory(self):
        with patch.dict(os.environ, _clean_env(), clear=True):
            self.assertIsNone(get_postgres_dsn())


if __name__ == "__main__":
    unittest.main()
