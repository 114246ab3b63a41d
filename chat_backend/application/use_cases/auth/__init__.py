# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .logout import LogoutUseCase
from .refresh_tokens import RefreshTokensUseCase
from .resend_code import ResendCodeUseCase
from .results import AuthResult, SignUpResult
from .sign_in import SignInUseCase
from .sign_up import SignUpUseCase
from .verify_email import VerifyEmailUseCase

__all__ = [
    "AuthResult",
    "LogoutUseCase",
    "RefreshTokensUseCase",
    "ResendCodeUseCase",
    "SignInUseCase",
    "SignUpResult",
    "SignUpUseCase",
    "VerifyEmailUseCase",
]
