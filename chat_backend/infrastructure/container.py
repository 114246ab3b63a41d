# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from chat_backend.application import VerificationCodeSender
from chat_backend.application.services.password_hashing import \
    WerkzeugPasswordHasher
from chat_backend.application.services.verification_codes import \
    VerificationCodePolicy
from chat_backend.application.use_cases.auth import (LogoutUseCase,
                                                     RefreshTokensUseCase,
                                                     ResendCodeUseCase,
                                                     SignInUseCase,
                                                     SignUpUseCase,
                                                     VerifyEmailUseCase)
from chat_backend.domain.users.entities import TokenKind
from chat_backend.infrastructure.auth.jwt_tokens import JwtTokenIssuer
from chat_backend.infrastructure.db import Database
from chat_backend.infrastructure.mailer import build_verification_sender
from chat_backend.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from chat_backend.interfaces.http.controllers.auth_controller import (
    AuthController, CookieSettings)
from chat_backend.interfaces.http.controllers.misc_controller import \
    MiscController
from chat_backend.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def database(self) -> Database:
        return Database.from_config(self.config.database)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer.from_config(self.config.auth)

    @cached_property
    def verification_codes(self) -> VerificationCodePolicy:
        return VerificationCodePolicy(ttl=timedelta(seconds=self.config.auth.verification_code_ttl))

    @cached_property
    def verification_sender(self) -> VerificationCodeSender:
        ttl_minutes = max(1, self.config.auth.verification_code_ttl // 60)
        return build_verification_sender(self.config.email, ttl_minutes=ttl_minutes)

    @cached_property
    def sign_up_use_case(self) -> SignUpUseCase:
        return SignUpUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            sender=self.verification_sender,
            codes=self.verification_codes,
        )

    @cached_property
    def verify_email_use_case(self) -> VerifyEmailUseCase:
        return VerifyEmailUseCase(users=self.user_repository, tokens=self.token_issuer)

    @cached_property
    def resend_code_use_case(self) -> ResendCodeUseCase:
        return ResendCodeUseCase(
            users=self.user_repository,
            sender=self.verification_sender,
            codes=self.verification_codes,
        )

    @cached_property
    def sign_in_use_case(self) -> SignInUseCase:
        return SignInUseCase(
            users=self.user_repository,
            tokens=self.token_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def refresh_tokens_use_case(self) -> RefreshTokensUseCase:
        return RefreshTokensUseCase(users=self.user_repository, tokens=self.token_issuer)

    @cached_property
    def logout_use_case(self) -> LogoutUseCase:
        return LogoutUseCase()

    @cached_property
    def cookie_settings(self) -> CookieSettings:
        return CookieSettings(
            secure=self.config.cookies_secure(),
            samesite=self.config.security.cookie_samesite,
            access_max_age=int(self.token_issuer.lifetime(TokenKind.ACCESS).total_seconds()),
            refresh_max_age=int(self.token_issuer.lifetime(TokenKind.REFRESH).total_seconds()),
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            sign_up_use_case=self.sign_up_use_case,
            verify_email_use_case=self.verify_email_use_case,
            resend_code_use_case=self.resend_code_use_case,
            sign_in_use_case=self.sign_in_use_case,
            refresh_tokens_use_case=self.refresh_tokens_use_case,
            logout_use_case=self.logout_use_case,
            cookies=self.cookie_settings,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def close(self) -> None:
        if "database" in self.__dict__:
            self.database.dispose()
