# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from chat_backend.application.interfaces import TokenIssuer
from chat_backend.domain.users.exceptions import (EmailNotVerifiedError,
                                                  InvalidCredentialsError)
from chat_backend.domain.users.repositories import PasswordHasher, UserRepository

from .results import AuthResult


class SignInUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenIssuer,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, email: str, password: str) -> AuthResult:
        user = self._users.find_by_email(email)
        if user is None:
            raise InvalidCredentialsError()

        # Unverified accounts are rejected before the password is checked.
        if not user.is_email_verified:
            raise EmailNotVerifiedError()

        if not self._password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        tokens = self._tokens.issue(user.id, user.email)
        return AuthResult(user=user.profile(), tokens=tokens)
