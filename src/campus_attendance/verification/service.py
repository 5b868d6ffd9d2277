from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from ..common.datetime_utils import now_local
from ..common.validators import normalize_email
from ..core.constants import DEFAULT_OTP_TTL_MINUTES, OTP_LENGTH
from ..core.exceptions import ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .mailer import VerificationSender
from .model import EmailVerificationToken
from .repository import VerificationTokenRepository

logger = logging.getLogger(__name__)


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Numeric code without a leading zero, e.g. ``483920``."""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


class VerificationService:
    """Use cases: issue, resend and check email verification codes."""

    def __init__(
        self,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        sender: VerificationSender,
        *,
        ttl_minutes: int = DEFAULT_OTP_TTL_MINUTES,
        clock: Callable[[], datetime] = now_local,
        otp_factory: Callable[[], str] = generate_otp,
    ):
        self._users = users
        self._tokens = tokens
        self._sender = sender
        self._ttl = timedelta(minutes=int(ttl_minutes))
        self._clock = clock
        self._otp_factory = otp_factory

    def issue_otp(self, user: User) -> EmailVerificationToken:
        otp = self._otp_factory()
        token = self._tokens.create_token(
            user_id=user.user_id,
            otp=otp,
            expires_at=self._clock() + self._ttl,
        )
        self._sender.send_otp(to=user.email, otp=otp, ttl_minutes=int(self._ttl.total_seconds() // 60))
        logger.info("Issued verification code for user_id=%s", user.user_id)
        return token

    def resend(self, email: str) -> EmailVerificationToken:
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")

        user = self._users.get_by_email(email)
        if not user:
            raise ValidationError("Invalid email")
        if user.is_email_verified:
            raise ValidationError("Email is already verified")

        return self.issue_otp(user)

    def verify(self, email: str, otp: str) -> User:
        email = normalize_email(email)
        otp = (otp or "").strip()
        if not email or not otp:
            raise ValidationError("Fields are missing")

        user = self._users.get_by_email(email)
        if not user:
            raise ValidationError("Invalid email or code")

        token = self._tokens.find_latest_unused(user_id=user.user_id, otp=otp)
        if not token:
            raise ValidationError("Invalid verification code")
        if token.is_expired(self._clock()):
            raise ValidationError("Verification code is expired")

        self._tokens.mark_verified(user_id=user.user_id, token_id=token.token_id)
        logger.info("Email verified for user_id=%s", user.user_id)
        return user
