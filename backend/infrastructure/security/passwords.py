from __future__ import annotations

import logging

import bcrypt

from application.ports.password_hasher_port import PasswordHasherPort

logger = logging.getLogger(__name__)


class BcryptPasswordHasher(PasswordHasherPort):
    """bcrypt hashing; ``rounds`` is the log2 work factor (4..31)."""

    def __init__(self, *, rounds: int = 12) -> None:
        if not 4 <= int(rounds) <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self._rounds = int(rounds)

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError as exc:
            # Malformed hash in storage.
            logger.warning("Password verification failed: %s", exc)
            return False
