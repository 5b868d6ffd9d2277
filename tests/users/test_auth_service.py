from __future__ import annotations

import pytest

from campus_attendance.core.enums import UserRole
from campus_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    EmailNotVerifiedError,
    ValidationError,
)
from campus_attendance.users.service import complete_profile_path, landing_path


def _signup(campus, **overrides):
    data = {"email": "new@campus.test", "phone": "9811111111", "password": "Strong@123", "role": "student"}
    data.update(overrides)
    return campus.container.auth_service.signup(**data)


def test_signup_creates_unverified_user_and_emails_otp(campus):
    result = _signup(campus, email="  New@Campus.TEST ")

    assert result.created is True
    assert result.message == "Account created successfully. Please verify your email."
    assert result.redirect_to == "/email-verify"
    assert result.user.email == "new@campus.test"
    assert result.user.role == UserRole.STUDENT
    assert result.user.is_email_verified is False
    assert result.user.password_hash != "Strong@123"

    assert campus.sender.sent == [{"to": "new@campus.test", "otp": "123456", "ttl_minutes": 10}]
    token = campus.tokens.tokens[1]
    assert token.user_id == result.user.user_id
    assert token.expires_at == campus.clock.now.replace(minute=40)


@pytest.mark.parametrize("missing", ["email", "phone", "password", "role"])
def test_signup_requires_every_field(campus, missing):
    with pytest.raises(ValidationError, match="Missing required fields"):
        _signup(campus, **{missing: ""})


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("email", "not-an-email", "Invalid email"),
        ("phone", "12345", "Phone must be 10 digits"),
        ("password", "short1!", "Password must be at least 8 characters"),
        ("password", "alllowercase1!", "Password must have upper, lower, number and special char"),
    ],
)
def test_signup_rejects_malformed_fields(campus, field, value, message):
    with pytest.raises(ValidationError, match=message):
        _signup(campus, **{field: value})


def test_signup_existing_unverified_email_points_back_to_verification(campus):
    campus.users.add(email="new@campus.test", phone="9822222222", verified=False)

    result = _signup(campus)

    assert result.created is False
    assert result.message == "Email already registered but not verified"
    assert result.redirect_to == "/email-verify"
    assert campus.sender.sent == []


def test_signup_existing_verified_email_conflicts(campus):
    campus.users.add(email="new@campus.test", phone="9822222222", verified=True)

    with pytest.raises(ConflictError, match="Cannot create account with this email."):
        _signup(campus)


def test_signup_phone_taken_conflicts(campus):
    campus.users.add(email="other@campus.test", phone="9811111111")

    with pytest.raises(ConflictError, match="Phone number already registered"):
        _signup(campus)


def test_signup_rejects_unknown_role(campus):
    with pytest.raises(ValidationError, match="Invalid role"):
        _signup(campus, role="admin")


def test_signup_maps_teacher_role(campus):
    result = _signup(campus, role="Teacher")
    assert result.user.role == UserRole.TEACHER


def test_authenticate_success_returns_user(campus):
    user = campus.users.add(email="s@campus.test")
    assert campus.container.auth_service.authenticate(" S@campus.test ", "Secret@123") == user


def test_authenticate_requires_email_and_password(campus):
    with pytest.raises(ValidationError, match="Email and password are required."):
        campus.container.auth_service.authenticate("s@campus.test", "")


def test_authenticate_unknown_email_and_wrong_password_share_message(campus):
    campus.users.add(email="s@campus.test")
    auth = campus.container.auth_service

    with pytest.raises(AuthenticationError, match="Invalid email or password."):
        auth.authenticate("nobody@campus.test", "Secret@123")
    with pytest.raises(AuthenticationError, match="Invalid email or password."):
        auth.authenticate("s@campus.test", "Wrong@123")


def test_authenticate_wrong_password_on_unverified_account_does_not_leak_state(campus):
    campus.users.add(email="s@campus.test", verified=False)

    with pytest.raises(AuthenticationError):
        campus.container.auth_service.authenticate("s@campus.test", "Wrong@123")


def test_authenticate_unverified_account_redirects_to_verification(campus):
    campus.users.add(email="s+1@campus.test", verified=False)

    with pytest.raises(EmailNotVerifiedError) as exc:
        campus.container.auth_service.authenticate("s+1@campus.test", "Secret@123")

    assert exc.value.status_code == 403
    assert exc.value.redirect_to == "/email-verify?email=s%2B1%40campus.test"


def test_authenticate_deactivated_account(campus):
    campus.users.add(email="s@campus.test", active=False)

    with pytest.raises(AuthorizationError, match="Your account is deactivated. Contact admin."):
        campus.container.auth_service.authenticate("s@campus.test", "Secret@123")


def test_landing_path_by_profile_state_and_role(campus):
    student = campus.users.add(email="a@campus.test", phone="9800000011", role=UserRole.STUDENT)
    teacher = campus.users.add(email="b@campus.test", phone="9800000012", role=UserRole.TEACHER,
                               profile_complete=True)
    hod = campus.users.add(email="c@campus.test", phone="9800000013", role=UserRole.HOD)

    assert landing_path(student) == "/complete-profile?role=student&email=a%40campus.test"
    assert landing_path(teacher) == "/dashboard/teacher"
    assert complete_profile_path(hod) == "/complete-profile?email=c%40campus.test"


def test_dashboard_redirect(campus):
    auth = campus.container.auth_service
    unverified = campus.users.add(email="u@campus.test", phone="9800000021", verified=False)
    incomplete = campus.users.add(email="i@campus.test", phone="9800000022")
    admin = campus.users.add(email="a@campus.test", phone="9800000023", role=UserRole.ADMIN,
                             profile_complete=True)

    assert auth.dashboard_redirect(None) == "/login"
    assert auth.dashboard_redirect(999) == "/login"
    assert auth.dashboard_redirect(unverified.user_id) == "/login"
    assert auth.dashboard_redirect(incomplete.user_id) == "/complete-profile"
    assert auth.dashboard_redirect(admin.user_id) == "/dashboard/admin"
