"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from chat_backend.domain.users.repositories import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """scrypt (N=2**15, r=8, p=1) with a random salt per hash."""

    def __init__(self, method: str = "scrypt:32768:8:1", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return str(
            generate_password_hash(password, method=self._method, salt_length=self._salt_length)
        )

    def verify(self, password: str, hashed: str) -> bool:
        return bool(check_password_hash(hashed, password))
