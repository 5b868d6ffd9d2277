from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import UserRole


@dataclass(frozen=True)
class User:
    """Account row from ``users``.

    Pure data object; persistence lives in the repository.
    """

    user_id: int
    email: str
    phone: str
    password_hash: str
    role: UserRole
    is_email_verified: bool = False
    is_profile_complete: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "phone": self.phone,
            "role": self.role.value,
            "isEmailVerified": self.is_email_verified,
            "createdAt": iso_or_none(self.created_at),
        }
