from __future__ import annotations

import logging
from typing import Protocol

from flask import current_app
from flask_mail import Message

from ..extensions import mail

logger = logging.getLogger(__name__)

SUBJECT = "Verify your email - Campus Attendance"


class VerificationSender(Protocol):
    def send_otp(self, *, to: str, otp: str, ttl_minutes: int) -> bool:
        raise NotImplementedError


class FlaskMailVerificationSender(VerificationSender):
    """Sends verification codes through the Flask-Mail extension.

    Needs an application context. Without ``MAIL_SERVER`` nothing is sent and
    an error is logged, so signup keeps working on machines with no SMTP.
    """

    def send_otp(self, *, to: str, otp: str, ttl_minutes: int) -> bool:
        if not current_app.config.get("MAIL_SERVER"):
            logger.error("MAIL_SERVER is not set; verification code for %s not sent", to)
            return False

        msg = Message(subject=SUBJECT, recipients=[to])
        msg.body = (
            f"Your verification code is: {otp}\n\n"
            f"This code will expire in {ttl_minutes} minutes.\n"
            "If you did not request this, you can ignore this email."
        )
        msg.html = (
            "<div style=\"font-family: system-ui, sans-serif;\">"
            "<h2>Verify your email</h2>"
            "<p>Your verification code is:</p>"
            f"<div style=\"font-size: 24px; font-weight: bold; letter-spacing: 4px; margin: 12px 0;\">{otp}</div>"
            f"<p>This code will expire in {ttl_minutes} minutes.</p>"
            "<p>If you did not request this, you can ignore this email.</p>"
            "</div>"
        )
        mail.send(msg)
        logger.info("Verification code sent to %s", to)
        return True
