# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations


class ValidationErrorType:
    MISSING = "missing"
    EMAIL_INVALID = "email_invalid"
    EMAIL_TOO_LONG = "email_too_long"
    PASSWORD_TOO_SHORT = "password_too_short"
    PASSWORD_TOO_LONG = "password_too_long"
    PASSWORD_NO_UPPERCASE = "password_no_uppercase"
    PASSWORD_NO_LOWERCASE = "password_no_lowercase"
    PASSWORD_NO_DIGIT = "password_no_digit"
    NAME_INVALID_CHARS = "name_invalid_chars"
    CODE_INVALID = "code_invalid"


__all__ = ["ValidationErrorType"]
