# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import TokenKind, TokenPair, TokenPayload, User, UserProfile
from .repositories import PasswordHasher, UserRepository

__all__ = [
    "PasswordHasher",
    "TokenKind",
    "TokenPair",
    "TokenPayload",
    "User",
    "UserProfile",
    "UserRepository",
]
