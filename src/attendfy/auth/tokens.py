from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_TTL_HOURS
from ..core.enums import Role
from ..core.exceptions import InvalidToken


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Optional[Role]
    expires_at: datetime


class TokenService:
    """Issues and verifies signed session tokens (JWT, HS256 by default)."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=DEFAULT_TOKEN_TTL_HOURS),
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    def issue(self, user, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user.user_id),
            "userId": int(user.user_id),
            "role": user.role.value,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise InvalidToken() from e

        try:
            user_id = int(payload["userId"])
            role = Role(payload["role"]) if payload.get("role") else None
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken() from e

        return TokenClaims(user_id=user_id, role=role, expires_at=expires_at)
