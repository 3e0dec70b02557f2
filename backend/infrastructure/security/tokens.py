from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

import jwt

from domain.errors import AuthenticationError
from domain.user import AuthenticatedUser, User


def bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        return ""
    if raw.lower().startswith("bearer "):
        return raw.split(" ", 1)[1].strip()
    return raw


class JwtTokenCodec:
    """Issue and verify HS* access tokens carrying ``sub`` and ``username``."""

    def __init__(
        self,
        *,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24,
    ) -> None:
        if not secret_key:
            raise ValueError("JWT secret key is not configured")
        self._secret = secret_key
        self._algorithm = algorithm
        self._expire = timedelta(minutes=int(expire_minutes))

    @property
    def algorithms(self) -> Sequence[str]:
        return (self._algorithm,)

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user.user_id,
            "username": user.username,
            "iat": now,
            "exp": now + self._expire,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> AuthenticatedUser:
        if not token:
            raise AuthenticationError("Unauthorized")
        try:
            claims = jwt.decode(token, self._secret, algorithms=list(self.algorithms))
        except jwt.PyJWTError as exc:
            raise AuthenticationError("Invalid token") from exc

        user_id = claims.get("sub")
        username = claims.get("username")
        if not user_id or not username:
            raise AuthenticationError("Invalid token")
        return AuthenticatedUser(user_id=str(user_id), username=str(username))
