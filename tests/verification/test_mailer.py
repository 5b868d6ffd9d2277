from __future__ import annotations

from campus_attendance.extensions import mail
from campus_attendance.verification.mailer import SUBJECT, FlaskMailVerificationSender


def test_sends_code_through_flask_mail(app):
    sender = FlaskMailVerificationSender()
    with app.app_context(), mail.record_messages() as outbox:
        assert sender.send_otp(to="s@campus.test", otp="482913", ttl_minutes=10) is True

    assert len(outbox) == 1
    assert outbox[0].subject == SUBJECT
    assert outbox[0].recipients == ["s@campus.test"]
    assert "482913" in outbox[0].body
    assert "10 minutes" in outbox[0].body


def test_skips_when_mail_server_missing(app, caplog):
    app.config["MAIL_SERVER"] = ""
    sender = FlaskMailVerificationSender()
    with app.app_context(), mail.record_messages() as outbox:
        assert sender.send_otp(to="s@campus.test", otp="482913", ttl_minutes=10) is False

    assert outbox == []
    assert "MAIL_SERVER is not set" in caplog.text
