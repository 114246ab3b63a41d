from __future__ import annotations

import smtplib
from unittest.mock import MagicMock

import pytest

from chat_backend.domain.users.exceptions import EmailDeliveryError
from chat_backend.infrastructure import mailer
from chat_backend.infrastructure.mailer import (LoggingVerificationCodeSender,
                                                SmtpVerificationCodeSender,
                                                build_verification_email,
                                                build_verification_sender)
from chat_backend.shared.config import load_config
from chat_backend.shared.logging import sanitize_message


def test_verification_email_contains_code() -> None:
    message = build_verification_email(
        sender="no-reply@chat.local",
        recipient="alice@example.com",
        code="123456",
        name="Alice",
        ttl_minutes=15,
    )

    assert message["To"] == "alice@example.com"
    assert message["Subject"] == "Verify Your Email - Chat App"
    text = message.get_body(preferencelist=("plain",)).get_content()
    html = message.get_body(preferencelist=("html",)).get_content()
    assert "123456" in text and "15 minutes" in text
    assert "123456" in html


def test_console_backend_is_default() -> None:
    sender = build_verification_sender(load_config().email)

    assert isinstance(sender, LoggingVerificationCodeSender)


def test_smtp_backend_selected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMAIL_BACKEND", "smtp")

    sender = build_verification_sender(load_config().email)

    assert isinstance(sender, SmtpVerificationCodeSender)


def test_smtp_sender_uses_starttls_and_login(monkeypatch: pytest.MonkeyPatch) -> None:
    smtp = MagicMock()
    smtp_cls = MagicMock()
    smtp_cls.return_value.__enter__.return_value = smtp
    monkeypatch.setattr(mailer.smtplib, "SMTP", smtp_cls)
    sender = SmtpVerificationCodeSender(
        host="smtp.example.com",
        port=587,
        from_email="no-reply@chat.local",
        username="mailer",
        password="pw",
    )

    sender.send_verification_code("alice@example.com", "123456", "Alice")

    smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=10.0)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("mailer", "pw")
    smtp.send_message.assert_called_once()


def test_smtp_failure_raises_delivery_error(monkeypatch: pytest.MonkeyPatch) -> None:
    smtp_cls = MagicMock(side_effect=smtplib.SMTPConnectError(421, "unavailable"))
    monkeypatch.setattr(mailer.smtplib, "SMTP", smtp_cls)
    sender = SmtpVerificationCodeSender(
        host="smtp.example.com", port=587, from_email="no-reply@chat.local"
    )

    with pytest.raises(EmailDeliveryError):
        sender.send_verification_code("alice@example.com", "123456", "Alice")


def test_log_sanitizer_masks_emails_and_jwts() -> None:
    line = sanitize_message(
        "sent to alice@example.com token eyJhbGciOi.eyJzdWIiOi.c2lnbmF0dXJl"
    )

    assert "alice@" not in line
    assert "***@example.com" in line
    assert "eyJhbGciOi" not in line
