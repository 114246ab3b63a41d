# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from chat_backend.shared.errors.base import DomainError, InfrastructureError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "User with this email already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class EmailNotVerifiedError(DomainError):
    code = "email_not_verified"
    status = HTTPStatus.FORBIDDEN
    message = "Please verify your email before signing in"


# Same code and message as a failed sign-in so lookups cannot enumerate users.
class UserNotFoundError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class EmailAlreadyVerifiedError(DomainError):
    code = "email_already_verified"
    status = HTTPStatus.CONFLICT
    message = "Email is already verified"


class VerificationCodeMissingError(DomainError):
    code = "verification_code_missing"
    status = HTTPStatus.BAD_REQUEST
    message = "No verification code found. Please request a new one."


class VerificationCodeExpiredError(DomainError):
    code = "verification_code_expired"
    status = HTTPStatus.UNAUTHORIZED
    message = "Verification code has expired. Please request a new one."


class InvalidVerificationCodeError(DomainError):
    code = "invalid_verification_code"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid verification code"


class InvalidRefreshTokenError(DomainError):
    code = "invalid_refresh_token"
    status = HTTPStatus.FORBIDDEN
    message = "Invalid refresh token"


class RefreshTokenMissingError(DomainError):
    code = "refresh_token_missing"
    status = HTTPStatus.UNAUTHORIZED
    message = "Refresh token not found"


class TokenValidationError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid token"


class InvalidTokenError(TokenValidationError):
    code = "invalid_token"


class TokenExpiredError(TokenValidationError):
    code = "token_expired"
    message = "Token has expired"


class WrongTokenKindError(TokenValidationError):
    code = "wrong_token_kind"
    message = "Invalid token type"


class EmailDeliveryError(InfrastructureError):
    def __init__(self, message: str = "Email delivery failed") -> None:
        super().__init__("email_delivery_failed", message=message)


class VerificationEmailFailedError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__(
            "verification_email_failed",
            message="Failed to send verification email",
        )
