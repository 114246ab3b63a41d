# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hmac

from chat_backend.application.interfaces import Clock, TokenIssuer, utcnow
from chat_backend.domain.users.exceptions import (EmailAlreadyVerifiedError,
                                                  InvalidVerificationCodeError,
                                                  UserNotFoundError,
                                                  VerificationCodeExpiredError,
                                                  VerificationCodeMissingError)
from chat_backend.domain.users.repositories import UserRepository
from chat_backend.shared.logging import logger

from .results import AuthResult


class VerifyEmailUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenIssuer,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._clock = clock

    def execute(self, email: str, code: str) -> AuthResult:
        user = self._users.find_by_email(email)
        if user is None:
            raise UserNotFoundError()
        if user.is_email_verified:
            raise EmailAlreadyVerifiedError()
        if not user.has_pending_code:
            raise VerificationCodeMissingError()
        if user.code_expired(self._clock()):
            raise VerificationCodeExpiredError()
        if not hmac.compare_digest(
            user.email_verification_code.encode(), code.encode()
        ):
            raise InvalidVerificationCodeError()

        verified = self._users.update(user.mark_verified())
        logger.info(f"auth.verify_email: verified user_id={verified.id}")

        tokens = self._tokens.issue(verified.id, verified.email)
        return AuthResult(user=verified.profile(), tokens=tokens)
