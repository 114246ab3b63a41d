# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from chat_backend.application.interfaces import Clock, VerificationCodeSender, utcnow
from chat_backend.application.services.verification_codes import VerificationCodePolicy
from chat_backend.domain.users.entities import User
from chat_backend.domain.users.exceptions import UserAlreadyExistsError
from chat_backend.domain.users.repositories import PasswordHasher, UserRepository
from chat_backend.shared.logging import logger

from .results import SignUpResult

SIGN_UP_MESSAGE = (
    "Account created successfully! Please check your email for verification code."
)


class SignUpUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        sender: VerificationCodeSender,
        codes: VerificationCodePolicy | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._sender = sender
        self._codes = codes or VerificationCodePolicy()
        self._clock = clock

    def execute(self, email: str, password: str, name: str) -> SignUpResult:
        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()

        code, expires_at = self._codes.new_code(self._clock())
        user = User(
            id="",
            email=email,
            password_hash=self._password_hasher.hash(password),
            name=name,
            email_verification_code=code,
            email_verification_expiry=expires_at,
        )
        # The unique constraint still decides concurrent sign-ups.
        persisted = self._users.add(user)
        logger.info(f"auth.sign_up: created user_id={persisted.id}")

        try:
            self._sender.send_verification_code(persisted.email, code, persisted.name)
        except Exception:
            logger.exception(
                f"auth.sign_up: verification email failed user_id={persisted.id}"
            )

        return SignUpResult(email=persisted.email, message=SIGN_UP_MESSAGE)
