from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import UserRole
from .model import User


class UserRepository(Protocol):
    """Repository interface for accounts.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_phone(self, phone: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, email: str, phone: str, password_hash: str, role: UserRole) -> User:
        """Insert an unverified, profile-incomplete account.

        Raises ``ConflictError`` when a unique column is already taken.
        """
        raise NotImplementedError
