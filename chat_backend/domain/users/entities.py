# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""User accounts and the credentials issued to them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any

from chat_backend.domain.exceptions import InvariantViolation


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(slots=True, frozen=True)
class UserProfile:
    """Public view of a user, safe to return to clients."""

    id: str
    email: str
    name: str
    avatar_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "avatarUrl": self.avatar_url,
        }


@dataclass(slots=True, frozen=True)
class User:
    """Stored account; unverified users may hold one outstanding code."""

    id: str
    email: str
    password_hash: str
    name: str
    avatar_url: str | None = None
    is_email_verified: bool = False
    email_verification_code: str | None = None
    email_verification_expiry: datetime | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.is_email_verified and (
            self.email_verification_code is not None
            or self.email_verification_expiry is not None
        ):
            raise InvariantViolation(
                "verified user cannot hold a verification code",
                field="email_verification_code",
            )

    @property
    def has_pending_code(self) -> bool:
        return (
            self.email_verification_code is not None
            and self.email_verification_expiry is not None
        )

    def code_expired(self, now: datetime) -> bool:
        """True once ``now`` is strictly past the expiry."""

        if self.email_verification_expiry is None:
            return True
        return now > self.email_verification_expiry

    def with_verification_code(self, code: str, expires_at: datetime) -> User:
        if self.is_email_verified:
            raise InvariantViolation("email is already verified", field="is_email_verified")
        return replace(
            self,
            email_verification_code=code,
            email_verification_expiry=expires_at,
        )

    def mark_verified(self) -> User:
        return replace(
            self,
            is_email_verified=True,
            email_verification_code=None,
            email_verification_expiry=None,
        )

    def profile(self) -> UserProfile:
        return UserProfile(
            id=self.id, email=self.email, name=self.name, avatar_url=self.avatar_url
        )


@dataclass(slots=True, frozen=True)
class TokenPair:

    access_token: str
    refresh_token: str


@dataclass(slots=True, frozen=True)
class TokenPayload:

    subject: str
    email: str
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
