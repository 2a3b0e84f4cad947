from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User, UserFilter


class UserRepository(Protocol):
    """Repository interface for users.

    The service layer depends on this interface, not on a concrete database.
    Implementations raise ``ConflictError`` when a write would duplicate an
    email or employee id.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        role: Role,
        department: str,
        employee_id: str,
        assigned_admin_id: Optional[int] = None,
        device_id: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_user(self, user_id: int, changes: dict) -> bool:
        """Apply column -> value changes (keys are User field names)."""
        raise NotImplementedError

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_users(self, filters: UserFilter) -> Sequence[User]:
        raise NotImplementedError

    def count_users(self, *, role: Optional[Role] = None, department: Optional[str] = None) -> int:
        raise NotImplementedError
