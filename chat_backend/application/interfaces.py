# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from chat_backend.domain.users import TokenKind, TokenPair, TokenPayload

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)


class TokenIssuer(Protocol):
    def issue(self, user_id: str, email: str) -> TokenPair: ...

    def validate(self, token: str, expected_kind: TokenKind) -> TokenPayload: ...


class VerificationCodeSender(Protocol):
    def send_verification_code(self, email: str, code: str, name: str) -> None: ...
