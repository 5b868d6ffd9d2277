from __future__ import annotations

import pytest

from campus_attendance.core.exceptions import ValidationError
from campus_attendance.verification.service import generate_otp


@pytest.fixture
def pending(campus):
    return campus.users.add(email="pending@campus.test", verified=False)


def test_generate_otp_is_six_digits():
    for _ in range(50):
        otp = generate_otp()
        assert len(otp) == 6
        assert otp.isdigit()
        assert otp[0] != "0"


def test_resend_issues_fresh_code(campus, pending):
    token = campus.container.verification_service.resend(" Pending@Campus.test ")

    assert token.user_id == pending.user_id
    assert token.used is False
    assert campus.sender.sent[-1]["to"] == "pending@campus.test"


@pytest.mark.parametrize(
    "email,message",
    [("", "Email is required"), ("ghost@campus.test", "Invalid email")],
)
def test_resend_rejects_missing_or_unknown_email(campus, email, message):
    with pytest.raises(ValidationError, match=message):
        campus.container.verification_service.resend(email)


def test_resend_refuses_verified_account(campus):
    campus.users.add(email="done@campus.test", verified=True)

    with pytest.raises(ValidationError, match="Email is already verified"):
        campus.container.verification_service.resend("done@campus.test")
    assert campus.sender.sent == []


def test_verify_marks_user_and_token(campus, pending):
    svc = campus.container.verification_service
    token = svc.issue_otp(pending)

    svc.verify("pending@campus.test", " 123456 ")

    assert campus.users.get_by_id(pending.user_id).is_email_verified is True
    assert campus.tokens.tokens[token.token_id].used is True


def test_verify_requires_both_fields(campus):
    with pytest.raises(ValidationError, match="Fields are missing"):
        campus.container.verification_service.verify("pending@campus.test", "")


def test_verify_unknown_email(campus):
    with pytest.raises(ValidationError, match="Invalid email or code"):
        campus.container.verification_service.verify("ghost@campus.test", "123456")


def test_verify_wrong_code(campus, pending):
    campus.container.verification_service.issue_otp(pending)

    with pytest.raises(ValidationError, match="Invalid verification code"):
        campus.container.verification_service.verify("pending@campus.test", "999999")


def test_verify_expired_code(campus, pending):
    svc = campus.container.verification_service
    svc.issue_otp(pending)
    campus.clock.advance(minutes=10, seconds=1)

    with pytest.raises(ValidationError, match="Verification code is expired"):
        svc.verify("pending@campus.test", "123456")
    assert campus.users.get_by_id(pending.user_id).is_email_verified is False


def test_code_still_valid_right_at_expiry(campus, pending):
    svc = campus.container.verification_service
    svc.issue_otp(pending)
    campus.clock.advance(minutes=10)

    svc.verify("pending@campus.test", "123456")
    assert campus.users.get_by_id(pending.user_id).is_email_verified is True


def test_used_code_cannot_be_replayed(campus, pending):
    svc = campus.container.verification_service
    svc.issue_otp(pending)
    svc.verify("pending@campus.test", "123456")

    with pytest.raises(ValidationError, match="Invalid verification code"):
        svc.verify("pending@campus.test", "123456")


def test_older_unused_code_still_verifies(campus, pending):
    svc = campus.container.verification_service
    svc.issue_otp(pending)  # 123456
    svc.issue_otp(pending)  # 654321

    svc.verify("pending@campus.test", "123456")
    assert campus.users.get_by_id(pending.user_id).is_email_verified is True
