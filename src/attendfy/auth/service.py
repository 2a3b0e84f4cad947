from __future__ import annotations

from typing import Optional

from ..core.exceptions import AccountDeactivated, NoToken, UserNotFound
from ..users.model import User
from ..users.repository import UserRepository
from .tokens import TokenService


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Token from an ``Authorization: Bearer <token>`` header value."""
    if not header or not header.strip():
        return None
    parts = header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    if len(parts) == 1 and parts[0].lower() != "bearer":
        return parts[0]
    return None


class SessionAuthenticator:
    """Resolves a bearer token to an active user."""

    def __init__(self, tokens: TokenService, users: UserRepository):
        self._tokens = tokens
        self._users = users

    def authenticate(self, authorization_header: Optional[str]) -> User:
        token = extract_bearer_token(authorization_header)
        if not token:
            raise NoToken()

        claims = self._tokens.decode(token)

        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise UserNotFound()
        if not user.is_active:
            raise AccountDeactivated()
        return user
