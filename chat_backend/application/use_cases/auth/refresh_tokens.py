# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from chat_backend.application.interfaces import TokenIssuer
from chat_backend.domain.users.entities import TokenKind, TokenPair
from chat_backend.domain.users.exceptions import (InvalidRefreshTokenError,
                                                  TokenValidationError)
from chat_backend.domain.users.repositories import UserRepository
from chat_backend.shared.logging import logger


class RefreshTokensUseCase:
    def __init__(self, *, users: UserRepository, tokens: TokenIssuer) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, refresh_token: str) -> TokenPair:
        try:
            payload = self._tokens.validate(refresh_token, TokenKind.REFRESH)
        except TokenValidationError as exc:
            logger.info(f"auth.refresh: rejected reason={exc.code}")
            raise InvalidRefreshTokenError() from exc

        user = self._users.find_by_id(payload.subject)
        if user is None or not user.is_email_verified:
            logger.info(f"auth.refresh: rejected reason=unknown_or_unverified sub={payload.subject}")
            raise InvalidRefreshTokenError()

        # No revocation list: the presented token stays valid until it expires.
        return self._tokens.issue(user.id, user.email)
