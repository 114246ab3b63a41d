from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from chat_backend.shared.errors.validation_types import ValidationErrorType

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_NAME_RE = re.compile(r"[a-zA-Z ]+")
_CODE_RE = re.compile(r"[0-9]{6}")


def _check_email(value: str) -> str:
    if not value:
        raise PydanticCustomError(ValidationErrorType.MISSING, "Email is required", {})
    if len(value) > 255:
        raise PydanticCustomError(
            ValidationErrorType.EMAIL_TOO_LONG, "Email too long", {"max_length": 255}
        )
    if not _EMAIL_RE.fullmatch(value):
        raise PydanticCustomError(ValidationErrorType.EMAIL_INVALID, "Invalid email format", {})
    return value


class SignUpRequestDTO(BaseModel):
    email: str
    password: str
    name: str = Field(min_length=2, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        if len(value) < 8:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_SHORT,
                "Password must be at least 8 characters",
                {"min_length": 8},
            )

        if len(value) > 128:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_LONG,
                "Password too long",
                {"max_length": 128},
            )

        if not re.search(r"[A-Z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_UPPERCASE,
                "Password must contain at least one uppercase letter",
                {},
            )

        if not re.search(r"[a-z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_LOWERCASE,
                "Password must contain at least one lowercase letter",
                {},
            )

        if not re.search(r"[0-9]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_DIGIT,
                "Password must contain at least one number",
                {},
            )

        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not _NAME_RE.fullmatch(value):
            raise PydanticCustomError(
                ValidationErrorType.NAME_INVALID_CHARS,
                "Name can only contain letters and spaces",
                {"pattern": _NAME_RE.pattern},
            )
        return value


class VerifyEmailRequestDTO(BaseModel):
    email: str
    code: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("code")
    @classmethod
    def validate_code(cls, value: str) -> str:
        if not _CODE_RE.fullmatch(value):
            raise PydanticCustomError(
                ValidationErrorType.CODE_INVALID,
                "Verification code must be exactly 6 digits",
                {"pattern": _CODE_RE.pattern},
            )
        return value


class ResendCodeRequestDTO(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class SignInRequestDTO(BaseModel):
    email: str
    password: str = Field(min_length=1, max_length=128)  # No strength check on sign-in

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class UserDTO(BaseModel):
    id: str
    email: str
    name: str
    avatar_url: str | None = Field(default=None, serialization_alias="avatarUrl")


class SignUpResponseDTO(BaseModel):
    email: str
    message: str


class AuthResponseDTO(BaseModel):
    user: UserDTO
    message: str


class MessageResponseDTO(BaseModel):
    message: str
