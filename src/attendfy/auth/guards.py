from __future__ import annotations

from functools import wraps
from typing import Iterable, Optional

from flask import g, request

from ..core.enums import Role
from ..core.permissions import check_roles, check_self_or_privileged
from ..users.model import User
from .service import SessionAuthenticator


def current_user() -> User:
    return g.current_user


class Guards:
    """Flask view decorators: authentication first, then the role gate."""

    def __init__(self, authenticator: SessionAuthenticator):
        self._authenticator = authenticator

    def _authenticate(self) -> User:
        user = self._authenticator.authenticate(request.headers.get("Authorization"))
        g.current_user = user
        return user

    def auth_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            self._authenticate()
            return view(*args, **kwargs)

        return wrapper

    def roles_required(self, allowed: Iterable[Role], requirement: Optional[str] = None):
        allowed = frozenset(allowed)

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                user = self._authenticate()
                check_roles(user, allowed, requirement)
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def self_or_admin(self, param: str = "user_id"):
        """Allow admins, super admins, or the user named by the `param` route argument."""

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                user = self._authenticate()
                check_self_or_privileged(user, kwargs[param])
                return view(*args, **kwargs)

            return wrapper

        return decorator
