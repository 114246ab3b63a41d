# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .interfaces import Clock, TokenIssuer, VerificationCodeSender, utcnow

__all__ = [
    "Clock",
    "TokenIssuer",
    "VerificationCodeSender",
    "utcnow",
]
