# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from chat_backend.application.interfaces import Clock, VerificationCodeSender, utcnow
from chat_backend.application.services.verification_codes import VerificationCodePolicy
from chat_backend.domain.users.exceptions import (EmailAlreadyVerifiedError,
                                                  UserNotFoundError,
                                                  VerificationEmailFailedError)
from chat_backend.domain.users.repositories import UserRepository
from chat_backend.shared.logging import logger

RESEND_MESSAGE = "Verification code sent successfully. Please check your email."


class ResendCodeUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sender: VerificationCodeSender,
        codes: VerificationCodePolicy | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._sender = sender
        self._codes = codes or VerificationCodePolicy()
        self._clock = clock

    def execute(self, email: str) -> str:
        user = self._users.find_by_email(email)
        if user is None:
            raise UserNotFoundError()
        if user.is_email_verified:
            raise EmailAlreadyVerifiedError()

        code, expires_at = self._codes.new_code(self._clock())
        updated = self._users.update(user.with_verification_code(code, expires_at))

        try:
            self._sender.send_verification_code(updated.email, code, updated.name)
        except Exception as exc:
            logger.exception(f"auth.resend_code: delivery failed user_id={updated.id}")
            raise VerificationEmailFailedError() from exc

        logger.info(f"auth.resend_code: code reissued user_id={updated.id}")
        return RESEND_MESSAGE
