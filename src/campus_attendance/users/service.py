from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlencode

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    normalize_email,
    require_fields,
    validate_email,
    validate_password,
    validate_phone,
)
from ..core.enums import UserRole
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    EmailNotVerifiedError,
    ValidationError,
)
from ..verification.service import VerificationService
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

EMAIL_VERIFY_PATH = "/email-verify"
LOGIN_PATH = "/login"
COMPLETE_PROFILE_PATH = "/complete-profile"

ROLE_DASHBOARDS = {
    UserRole.STUDENT: "/dashboard/student",
    UserRole.TEACHER: "/dashboard/teacher",
    UserRole.ADMIN: "/dashboard/admin",
    UserRole.HOD: "/dashboard/hod",
}


def dashboard_path(role: UserRole) -> str:
    return ROLE_DASHBOARDS.get(role, "/dashboard")


def complete_profile_path(user: User) -> str:
    params = {}
    if user.role == UserRole.STUDENT:
        params["role"] = "student"
    elif user.role == UserRole.TEACHER:
        params["role"] = "teacher"
    params["email"] = user.email
    return f"{COMPLETE_PROFILE_PATH}?{urlencode(params)}"


def landing_path(user: User) -> str:
    """Where a freshly logged-in user goes next."""
    if not user.is_profile_complete:
        return complete_profile_path(user)
    return dashboard_path(user.role)


@dataclass(frozen=True)
class SignupResult:
    """Outcome of a signup attempt.

    ``created`` is False when the email already belongs to an unverified
    account; the caller is then sent back to the verification page.
    """

    created: bool
    message: str
    redirect_to: str
    user: Optional[User] = None


class AuthService:
    """Use cases: signup, login and post-login routing."""

    def __init__(self, users: UserRepository, verification: Optional[VerificationService] = None):
        self._users = users
        self._verification = verification

    def signup(self, *, email: str, phone: str, password: str, role: str) -> SignupResult:
        require_fields(
            {"email": email, "phone": phone, "password": password, "role": role},
            ("email", "phone", "password", "role"),
            "Missing required fields",
        )

        email = validate_email(email)
        phone = validate_phone(phone)
        validate_password(password)

        existing = self._users.get_by_email(email)
        if existing:
            if not existing.is_email_verified:
                return SignupResult(
                    created=False,
                    message="Email already registered but not verified",
                    redirect_to=EMAIL_VERIFY_PATH,
                )
            raise ConflictError("Cannot create account with this email.")

        if self._users.get_by_phone(phone):
            raise ConflictError("Phone number already registered")

        mapped_role = UserRole.from_signup(role)
        if mapped_role is None:
            raise ValidationError("Invalid role")

        user = self._users.create_user(
            email=email,
            phone=phone,
            password_hash=generate_password_hash(password),
            role=mapped_role,
        )
        logger.info("Account created user_id=%s role=%s", user.user_id, user.role.value)

        if self._verification is not None:
            self._verification.issue_otp(user)

        return SignupResult(
            created=True,
            message="Account created successfully. Please verify your email.",
            redirect_to=EMAIL_VERIFY_PATH,
            user=user,
        )

    def authenticate(self, email: str, password: str) -> User:
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise ValidationError("Email and password are required.")

        user = self._users.get_by_email(normalize_email(email))
        if not user:
            raise AuthenticationError("Invalid email or password.")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password.")

        if not user.is_active:
            raise AuthorizationError("Your account is deactivated. Contact admin.")

        if not user.is_email_verified:
            raise EmailNotVerifiedError(
                "Please verify your email before logging in.",
                redirect_to=f"{EMAIL_VERIFY_PATH}?email={quote(user.email, safe='')}",
            )

        return user

    def get_user(self, user_id: Optional[int]) -> Optional[User]:
        if not user_id:
            return None
        return self._users.get_by_id(int(user_id))

    def dashboard_redirect(self, user_id: Optional[int]) -> str:
        user = self.get_user(user_id)
        if not user or not user.is_email_verified:
            return LOGIN_PATH
        if not user.is_profile_complete:
            return COMPLETE_PROFILE_PATH
        return dashboard_path(user.role)
