# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

CODE_MIN = 100_000
CODE_MAX = 999_999


def generate_verification_code() -> str:
    """Six digits drawn uniformly from 100000-999999 by the OS CSPRNG."""

    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


@dataclass(slots=True, frozen=True)
class VerificationCodePolicy:
    ttl: timedelta = timedelta(minutes=15)
    generator: Callable[[], str] = field(default=generate_verification_code)

    def new_code(self, now: datetime) -> tuple[str, datetime]:
        return self.generator(), now + self.ttl


__all__ = ["VerificationCodePolicy", "generate_verification_code"]
