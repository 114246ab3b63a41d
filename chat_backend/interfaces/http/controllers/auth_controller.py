# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from chat_backend.application.use_cases.auth import (LogoutUseCase,
                                                     RefreshTokensUseCase,
                                                     ResendCodeUseCase,
                                                     SignInUseCase,
                                                     SignUpUseCase,
                                                     VerifyEmailUseCase)
from chat_backend.application.use_cases.auth.results import AuthResult
from chat_backend.domain.users.entities import TokenPair
from chat_backend.domain.users.exceptions import RefreshTokenMissingError
from chat_backend.infrastructure.audit import AuditAction, audit_log
from chat_backend.interfaces.http.dto.auth import (AuthResponseDTO,
                                                   MessageResponseDTO,
                                                   ResendCodeRequestDTO,
                                                   SignInRequestDTO,
                                                   SignUpRequestDTO,
                                                   SignUpResponseDTO, UserDTO,
                                                   VerifyEmailRequestDTO)
from chat_backend.shared.errors import AppError
from chat_backend.shared.errors.validation import raise_validation_error
from chat_backend.shared.logging import logger
from chat_backend.shared.middleware.rate_limit import rate_limit
from chat_backend.shared.middleware.request_logger import client_ip

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"

VERIFY_EMAIL_MESSAGE = "Email verified successfully. You are now signed in."
SIGN_IN_MESSAGE = "Signed in successfully"
REFRESH_MESSAGE = "Tokens refreshed successfully"

_DTO = TypeVar("_DTO", bound=BaseModel)


@dataclass(slots=True, frozen=True)
class CookieSettings:
    secure: bool = False
    samesite: str = "Strict"
    access_max_age: int = 15 * 60
    refresh_max_age: int = 7 * 24 * 60 * 60


def _parse(dto_cls: type[_DTO]) -> _DTO:
    try:
        return dto_cls.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


def _auth_payload(result: AuthResult, message: str) -> dict:
    profile = result.user
    dto = AuthResponseDTO(
        user=UserDTO(
            id=profile.id,
            email=profile.email,
            name=profile.name,
            avatar_url=profile.avatar_url,
        ),
        message=message,
    )
    return dto.model_dump(by_alias=True)


class AuthController:
    def __init__(
        self,
        *,
        sign_up_use_case: SignUpUseCase,
        verify_email_use_case: VerifyEmailUseCase,
        resend_code_use_case: ResendCodeUseCase,
        sign_in_use_case: SignInUseCase,
        refresh_tokens_use_case: RefreshTokensUseCase,
        logout_use_case: LogoutUseCase,
        cookies: CookieSettings | None = None,
    ) -> None:
        self._sign_up_use_case = sign_up_use_case
        self._verify_email_use_case = verify_email_use_case
        self._resend_code_use_case = resend_code_use_case
        self._sign_in_use_case = sign_in_use_case
        self._refresh_tokens_use_case = refresh_tokens_use_case
        self._logout_use_case = logout_use_case
        self._cookies = cookies or CookieSettings()

    @rate_limit(limit=5, window_seconds=60.0)
    def sign_up(self) -> tuple[Response, int]:
        dto = _parse(SignUpRequestDTO)

        result = self._sign_up_use_case.execute(dto.email, dto.password, dto.name)

        audit_log(
            AuditAction.SIGN_UP,
            ip_address=client_ip(),
            details={"email": dto.email},
        )
        payload = SignUpResponseDTO(email=result.email, message=result.message)
        return jsonify(payload.model_dump()), 201

    @rate_limit(limit=5, window_seconds=60.0)
    def verify_email(self) -> tuple[Response, int]:
        dto = _parse(VerifyEmailRequestDTO)
        ip_address = client_ip()

        try:
            result = self._verify_email_use_case.execute(dto.email, dto.code)
        except AppError as exc:
            audit_log(
                AuditAction.EMAIL_VERIFICATION_FAILED,
                ip_address=ip_address,
                details={"email": dto.email, "error": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.EMAIL_VERIFIED, user_id=result.user.id, ip_address=ip_address)
        response = jsonify(_auth_payload(result, VERIFY_EMAIL_MESSAGE))
        self._set_token_cookies(response, result.tokens)
        return response, 200

    @rate_limit(limit=5, window_seconds=60.0)
    def resend_code(self) -> tuple[Response, int]:
        dto = _parse(ResendCodeRequestDTO)

        message = self._resend_code_use_case.execute(dto.email)

        audit_log(
            AuditAction.VERIFICATION_CODE_RESENT,
            ip_address=client_ip(),
            details={"email": dto.email},
        )
        return jsonify(MessageResponseDTO(message=message).model_dump()), 200

    @rate_limit(limit=10, window_seconds=60.0)
    def sign_in(self) -> tuple[Response, int]:
        dto = _parse(SignInRequestDTO)
        ip_address = client_ip()

        try:
            result = self._sign_in_use_case.execute(dto.email, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.SIGN_IN_FAILED,
                ip_address=ip_address,
                details={"email": dto.email, "error": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.SIGN_IN_SUCCESS, user_id=result.user.id, ip_address=ip_address)
        response = jsonify(_auth_payload(result, SIGN_IN_MESSAGE))
        self._set_token_cookies(response, result.tokens)
        logger.info(f"auth.sign_in: ok user_id={result.user.id}")
        return response, 200

    def refresh(self) -> tuple[Response, int]:
        refresh_token = request.cookies.get(REFRESH_COOKIE, "")
        if not refresh_token:
            raise RefreshTokenMissingError()

        try:
            tokens = self._refresh_tokens_use_case.execute(refresh_token)
        except AppError as exc:
            audit_log(
                AuditAction.TOKENS_REFRESH_FAILED,
                ip_address=client_ip(),
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.TOKENS_REFRESHED, ip_address=client_ip())
        response = jsonify(MessageResponseDTO(message=REFRESH_MESSAGE).model_dump())
        self._set_token_cookies(response, tokens)
        return response, 200

    def logout(self) -> tuple[Response, int]:
        message = self._logout_use_case.execute()

        audit_log(AuditAction.LOGOUT, ip_address=client_ip())
        response = jsonify(MessageResponseDTO(message=message).model_dump())
        self._clear_token_cookies(response)
        return response, 200

    def _set_token_cookies(self, response: Response, tokens: TokenPair) -> None:
        response.set_cookie(
            ACCESS_COOKIE,
            tokens.access_token,
            httponly=True,
            samesite=self._cookies.samesite,
            secure=self._cookies.secure,
            max_age=self._cookies.access_max_age,
        )
        response.set_cookie(
            REFRESH_COOKIE,
            tokens.refresh_token,
            httponly=True,
            samesite=self._cookies.samesite,
            secure=self._cookies.secure,
            max_age=self._cookies.refresh_max_age,
        )

    def _clear_token_cookies(self, response: Response) -> None:
        for name in (ACCESS_COOKIE, REFRESH_COOKIE):
            response.delete_cookie(
                name,
                httponly=True,
                samesite=self._cookies.samesite,
                secure=self._cookies.secure,
            )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
        bp.add_url_rule("/sign-up", view_func=self.sign_up, methods=["POST"])
        bp.add_url_rule("/verify-email", view_func=self.verify_email, methods=["POST"])
        bp.add_url_rule("/resend-code", view_func=self.resend_code, methods=["POST"])
        bp.add_url_rule("/sign-in", view_func=self.sign_in, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        return bp
