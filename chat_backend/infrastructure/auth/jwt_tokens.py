# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed access/refresh token pairs backed by PyJWT."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from chat_backend.application.interfaces import Clock, TokenIssuer, utcnow
from chat_backend.domain.users.entities import TokenKind, TokenPair, TokenPayload
from chat_backend.domain.users.exceptions import (InvalidTokenError,
                                                  TokenExpiredError,
                                                  WrongTokenKindError)
from chat_backend.shared.config import AuthConfig
from chat_backend.shared.errors import InfrastructureError

_REQUIRED_CLAIMS = ["sub", "iat", "exp", "type"]


class JwtTokenIssuer(TokenIssuer):
    """Issues HS256 tokens; access and refresh tokens use separate secrets."""

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
        clock: Clock = utcnow,
    ) -> None:
        if not access_secret or not refresh_secret:
            raise InfrastructureError("jwt_secret_missing", message="JWT secrets are not configured")
        self._keys: dict[TokenKind, tuple[str, timedelta]] = {
            TokenKind.ACCESS: (access_secret, access_ttl),
            TokenKind.REFRESH: (refresh_secret, refresh_ttl),
        }
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_config(cls, config: AuthConfig) -> JwtTokenIssuer:
        return cls(
            access_secret=config.jwt_access_secret,
            refresh_secret=config.jwt_refresh_secret,
            access_ttl=timedelta(seconds=config.access_token_ttl),
            refresh_ttl=timedelta(seconds=config.refresh_token_ttl),
            algorithm=config.jwt_algorithm,
        )

    def lifetime(self, kind: TokenKind) -> timedelta:
        return self._keys[kind][1]

    def issue(self, user_id: str, email: str) -> TokenPair:
        now = self._clock()
        return TokenPair(
            access_token=self._sign(user_id, email, TokenKind.ACCESS, now),
            refresh_token=self._sign(user_id, email, TokenKind.REFRESH, now),
        )

    def validate(self, token: str, expected_kind: TokenKind) -> TokenPayload:
        secret, _ = self._keys[expected_kind]
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        if claims.get("type") != expected_kind.value:
            raise WrongTokenKindError()

        return TokenPayload(
            subject=str(claims["sub"]),
            email=str(claims.get("email", "")),
            kind=expected_kind,
            issued_at=datetime.fromtimestamp(claims["iat"], UTC),
            expires_at=datetime.fromtimestamp(claims["exp"], UTC),
        )

    def _sign(self, user_id: str, email: str, kind: TokenKind, now: datetime) -> str:
        secret, ttl = self._keys[kind]
        payload: dict[str, Any] = {
            "sub": user_id,
            "email": email,
            "type": kind.value,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self._algorithm)


__all__ = ["JwtTokenIssuer"]
