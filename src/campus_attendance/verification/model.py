from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class EmailVerificationToken:
    token_id: int
    user_id: int
    otp: str
    expires_at: datetime
    used: bool = False
    created_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now
