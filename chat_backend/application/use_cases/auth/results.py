# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from chat_backend.domain.users import TokenPair, UserProfile


@dataclass(slots=True, frozen=True)
class SignUpResult:
    email: str
    message: str


@dataclass(slots=True, frozen=True)
class AuthResult:
    user: UserProfile
    tokens: TokenPair
