from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import EmailVerificationToken


class VerificationTokenRepository(Protocol):
    def create_token(self, *, user_id: int, otp: str, expires_at: datetime) -> EmailVerificationToken:
        raise NotImplementedError

    def find_latest_unused(self, *, user_id: int, otp: str) -> Optional[EmailVerificationToken]:
        """Newest unused token of the user carrying exactly this code."""
        raise NotImplementedError

    def mark_verified(self, *, user_id: int, token_id: int) -> None:
        """Flag the user verified and the token used in one transaction."""
        raise NotImplementedError
