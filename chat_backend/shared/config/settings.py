# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_SECRETS = ("dev", "development", "test", "secret", "changeme", "")


def _section_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
    )


def _parse_flag(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///chat.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    echo: bool = Field(False, alias="DATABASE_ECHO")

    model_config = _section_config()


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Strict", alias="COOKIE_SAMESITE")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, ge=0.1, alias="RL_WINDOW")

    model_config = _section_config()

    @field_validator("cookie_secure", "enable_rate_limit", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_flag(value)


class AuthConfig(BaseSettings):
    jwt_access_secret: str = Field(alias="JWT_ACCESS_SECRET")
    jwt_refresh_secret: str = Field(alias="JWT_REFRESH_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_ttl: int = Field(15 * 60, ge=1, alias="JWT_ACCESS_EXPIRY_SECONDS")
    refresh_token_ttl: int = Field(7 * 24 * 60 * 60, ge=1, alias="JWT_REFRESH_EXPIRY_SECONDS")
    verification_code_ttl: int = Field(15 * 60, ge=1, alias="VERIFICATION_CODE_TTL_SECONDS")

    model_config = _section_config()

    @field_validator("jwt_access_secret", "jwt_refresh_secret")
    @classmethod
    def _require_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT signing secret must not be empty")
        return value


class EmailConfig(BaseSettings):
    # "smtp" delivers through SMTP_HOST, "console" only writes the code to the log
    backend: str = Field("console", alias="EMAIL_BACKEND")
    smtp_host: str = Field("localhost", alias="SMTP_HOST")
    smtp_port: int = Field(587, ge=1, le=65535, alias="SMTP_PORT")
    smtp_user: str | None = Field(None, alias="SMTP_USER")
    smtp_password: str | None = Field(None, alias="SMTP_PASS")
    smtp_use_tls: bool = Field(True, alias="SMTP_USE_TLS")
    smtp_timeout: float = Field(10.0, ge=0.1, alias="SMTP_TIMEOUT")
    from_email: str = Field("no-reply@chat.local", alias="FROM_EMAIL")

    model_config = _section_config()

    @field_validator("backend")
    @classmethod
    def _check_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("smtp", "console"):
            raise ValueError("EMAIL_BACKEND must be 'smtp' or 'console'")
        return value

    @field_validator("smtp_use_tls", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_flag(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _email_config_factory() -> EmailConfig:
    return EmailConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    email: EmailConfig = Field(default_factory=_email_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        validate_by_name=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_flag(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in _INSECURE_SECRETS:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if len(self.auth.jwt_access_secret) < 32 or len(self.auth.jwt_refresh_secret) < 32:
            warnings.append("⚠️  JWT secrets are shorter than 32 characters")
        if self.auth.jwt_access_secret == self.auth.jwt_refresh_secret:
            warnings.append("⚠️  Access and refresh tokens share one signing secret")
        if self.email.backend == "console":
            warnings.append("⚠️  EMAIL_BACKEND=console, verification codes are only logged")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print("", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def cookies_secure(self) -> bool:
        return self.security.cookie_secure or self.is_production()


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "EmailConfig",
    "SecurityConfig",
    "load_config",
]
