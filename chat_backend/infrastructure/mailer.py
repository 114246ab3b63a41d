# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import html
import smtplib
from email.message import EmailMessage

from chat_backend.application import VerificationCodeSender
from chat_backend.domain.users.exceptions import EmailDeliveryError
from chat_backend.shared.config import EmailConfig
from chat_backend.shared.logging import logger

VERIFICATION_SUBJECT = "Verify Your Email - Chat App"


def build_verification_email(
    *, sender: str, recipient: str, code: str, name: str, ttl_minutes: int = 15
) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = VERIFICATION_SUBJECT
    message["From"] = sender
    message["To"] = recipient
    message.set_content(
        f"Welcome {name}!\n\n"
        f"Your verification code is: {code}\n\n"
        f"This code will expire in {ttl_minutes} minutes.\n"
        "If you didn't create this account, please ignore this email.\n"
    )
    message.add_alternative(
        f"""\
<div style="max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2>Welcome {html.escape(name)}!</h2>
  <p>Thank you for signing up. Please verify your email address by using the code below:</p>
  <div style="background: #f5f5f5; padding: 20px; text-align: center; margin: 20px 0;">
    <h1 style="color: #333; font-size: 32px; margin: 0;">{html.escape(code)}</h1>
  </div>
  <p>This code will expire in {ttl_minutes} minutes.</p>
  <p>If you didn't create this account, please ignore this email.</p>
</div>
""",
        subtype="html",
    )
    return message


class SmtpVerificationCodeSender(VerificationCodeSender):

    def __init__(
        self,
        *,
        host: str,
        port: int,
        from_email: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
        ttl_minutes: int = 15,
    ) -> None:
        self._host = host
        self._port = port
        self._from_email = from_email
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout
        self._ttl_minutes = ttl_minutes

    @classmethod
    def from_config(cls, config: EmailConfig, *, ttl_minutes: int = 15) -> SmtpVerificationCodeSender:
        return cls(
            host=config.smtp_host,
            port=config.smtp_port,
            from_email=config.from_email,
            username=config.smtp_user,
            password=config.smtp_password,
            use_tls=config.smtp_use_tls,
            timeout=config.smtp_timeout,
            ttl_minutes=ttl_minutes,
        )

    def send_verification_code(self, email: str, code: str, name: str) -> None:
        message = build_verification_email(
            sender=self._from_email,
            recipient=email,
            code=code,
            name=name,
            ttl_minutes=self._ttl_minutes,
        )
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError(f"SMTP delivery to {self._host}:{self._port} failed") from exc
        logger.info(f"email.smtp: verification code sent to={email}")


class LoggingVerificationCodeSender(VerificationCodeSender):
    """Development sender: writes the code to the log instead of mailing it."""

    def send_verification_code(self, email: str, code: str, name: str) -> None:
        logger.info(f"email.console: verification code for {email} ({name}): {code}")


def build_verification_sender(config: EmailConfig, *, ttl_minutes: int = 15) -> VerificationCodeSender:
    if config.backend == "smtp":
        return SmtpVerificationCodeSender.from_config(config, ttl_minutes=ttl_minutes)
    return LoggingVerificationCodeSender()


__all__ = [
    "LoggingVerificationCodeSender",
    "SmtpVerificationCodeSender",
    "build_verification_email",
    "build_verification_sender",
]
