"""Use-case for ending a client session."""

from __future__ import annotations

LOGOUT_MESSAGE = "Logged out successfully"


class LogoutUseCase:
    """Sessions are stateless; the transport layer drops the client's cookies."""

    def execute(self) -> str:
        return LOGOUT_MESSAGE
