# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from chat_backend.domain.users.entities import User as DomainUser
from chat_backend.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from chat_backend.domain.users.repositories import UserRepository
from chat_backend.infrastructure.db.models import User
from chat_backend.infrastructure.db.session import Database


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        name=row.name,
        avatar_url=row.avatar_url,
        is_email_verified=row.is_email_verified,
        email_verification_code=row.email_verification_code,
        email_verification_expiry=_as_utc(row.email_verification_expiry),
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    def find_by_email(self, email: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.query(User).filter(User.email == email).first()
            if not row:
                return None
            return _to_domain(row)

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.get(User, user_id)
            if not row:
                return None
            return _to_domain(row)

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = User(
                    email=user.email,
                    password_hash=user.password_hash,
                    name=user.name,
                    avatar_url=user.avatar_url,
                    is_email_verified=user.is_email_verified,
                    email_verification_code=user.email_verification_code,
                    email_verification_expiry=user.email_verification_expiry,
                )
                if user.id:
                    row.id = user.id
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc

    def update(self, user: DomainUser) -> DomainUser:
        with self._db.session_scope() as session:
            row = session.get(User, user.id)
            if not row:
                raise UserNotFoundError()
            row.email = user.email
            row.password_hash = user.password_hash
            row.name = user.name
            row.avatar_url = user.avatar_url
            row.is_email_verified = user.is_email_verified
            row.email_verification_code = user.email_verification_code
            row.email_verification_expiry = user.email_verification_expiry
            session.flush()
            return _to_domain(row)
