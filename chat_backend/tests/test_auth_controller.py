from __future__ import annotations

from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from chat_backend.application.use_cases.auth import (AuthResult,
                                                     SignInUseCase,
                                                     SignUpResult,
                                                     SignUpUseCase)
from chat_backend.application.use_cases.auth.logout import LogoutUseCase
from chat_backend.domain.users.entities import TokenPair, UserProfile
from chat_backend.domain.users.exceptions import (EmailNotVerifiedError,
                                                  InvalidRefreshTokenError)
from chat_backend.interfaces.http.controllers.auth_controller import (
    AuthController, CookieSettings)
from chat_backend.shared.middleware.error_handler import configure_error_handling

PROFILE = UserProfile(id="user-1", email="alice@example.com", name="Alice")
TOKENS = TokenPair(access_token="access123", refresh_token="refresh123")


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _controller(**overrides) -> AuthController:
    use_cases = {
        "sign_up_use_case": MagicMock(),
        "verify_email_use_case": MagicMock(),
        "resend_code_use_case": MagicMock(),
        "sign_in_use_case": MagicMock(),
        "refresh_tokens_use_case": MagicMock(),
        "logout_use_case": LogoutUseCase(),
    }
    use_cases.update(overrides)
    return AuthController(**use_cases)


def _cookies(response) -> dict[str, str]:
    return {
        header.split("=", 1)[0]: header
        for header in response.headers.getlist("Set-Cookie")
    }


def test_sign_up_returns_201(flask_app: Flask) -> None:
    called: dict[str, tuple[str, str, str]] = {}

    class StubSignUp:
        def execute(self, email: str, password: str, name: str) -> SignUpResult:
            called["args"] = (email, password, name)
            return SignUpResult(email=email, message="created")

    controller = _controller(sign_up_use_case=cast(SignUpUseCase, StubSignUp()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/v1/auth/sign-up",
            json={"email": "alice@example.com", "password": "Passw0rd!", "name": "Alice"},
        )

    assert response.status_code == 201
    assert response.get_json() == {"email": "alice@example.com", "message": "created"}
    assert called["args"] == ("alice@example.com", "Passw0rd!", "Alice")
    assert "Set-Cookie" not in response.headers


def test_sign_up_invalid_payload_returns_400(flask_app: Flask) -> None:
    sign_up = MagicMock()
    flask_app.register_blueprint(_controller(sign_up_use_case=sign_up).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/v1/auth/sign-up",
            json={"email": "not-an-email", "password": "weak", "name": "A1"},
        )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["statusCode"] == 400
    assert payload["error"] == "validation_error"
    assert payload["path"] == "/api/v1/auth/sign-up"
    assert "timestamp" in payload
    fields = {item["field"] for item in payload["errors"]}
    assert {"email", "password", "name"} <= fields
    sign_up.execute.assert_not_called()


def test_verify_email_rejects_non_numeric_code(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/v1/auth/verify-email", json={"email": "alice@example.com", "code": "12a456"}
        )

    assert response.status_code == 400
    assert response.get_json()["errors"][0]["field"] == "code"


def test_sign_in_sets_token_cookies(flask_app: Flask) -> None:
    class StubSignIn:
        def execute(self, email: str, password: str) -> AuthResult:
            return AuthResult(user=PROFILE, tokens=TOKENS)

    controller = _controller(
        sign_in_use_case=cast(SignInUseCase, StubSignIn()),
        cookies=CookieSettings(secure=True, samesite="Strict"),
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/v1/auth/sign-in", json={"email": "alice@example.com", "password": "anything"}
        )

    assert response.status_code == 200
    body = response.get_json()
    assert body["user"] == {
        "id": "user-1",
        "email": "alice@example.com",
        "name": "Alice",
        "avatarUrl": None,
    }
    assert "access123" not in response.get_data(as_text=True)

    cookies = _cookies(response)
    access = cookies["access_token"]
    refresh = cookies["refresh_token"]
    assert access.startswith("access_token=access123")
    assert refresh.startswith("refresh_token=refresh123")
    for header in (access, refresh):
        assert "HttpOnly" in header
        assert "Secure" in header
        assert "SameSite=Strict" in header
    assert "Max-Age=900" in access
    assert "Max-Age=604800" in refresh


def test_sign_in_unverified_returns_403(flask_app: Flask) -> None:
    sign_in = MagicMock()
    sign_in.execute.side_effect = EmailNotVerifiedError()
    flask_app.register_blueprint(_controller(sign_in_use_case=sign_in).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/v1/auth/sign-in", json={"email": "alice@example.com", "password": "x"}
        )

    assert response.status_code == 403
    assert response.get_json()["error"] == "email_not_verified"
    assert "Set-Cookie" not in response.headers


def test_refresh_without_cookie_returns_401(flask_app: Flask) -> None:
    refresh = MagicMock()
    flask_app.register_blueprint(_controller(refresh_tokens_use_case=refresh).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/v1/auth/refresh")

    assert response.status_code == 401
    assert response.get_json()["message"] == "Refresh token not found"
    refresh.execute.assert_not_called()


def test_refresh_reads_cookie_and_rotates(flask_app: Flask) -> None:
    refresh = MagicMock()
    refresh.execute.return_value = TokenPair(access_token="a2", refresh_token="r2")
    flask_app.register_blueprint(_controller(refresh_tokens_use_case=refresh).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("refresh_token", "r1")
        response = client.post("/api/v1/auth/refresh")

    assert response.status_code == 200
    refresh.execute.assert_called_once_with("r1")
    cookies = _cookies(response)
    assert cookies["access_token"].startswith("access_token=a2")
    assert cookies["refresh_token"].startswith("refresh_token=r2")


def test_refresh_with_invalid_token_returns_403(flask_app: Flask) -> None:
    refresh = MagicMock()
    refresh.execute.side_effect = InvalidRefreshTokenError()
    flask_app.register_blueprint(_controller(refresh_tokens_use_case=refresh).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("refresh_token", "bogus")
        response = client.post("/api/v1/auth/refresh")

    assert response.status_code == 403
    assert response.get_json()["error"] == "invalid_refresh_token"


def test_logout_clears_cookies(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("access_token", "a")
        client.set_cookie("refresh_token", "r")
        response = client.post("/api/v1/auth/logout")

        assert response.status_code == 200
        assert response.get_json() == {"message": "Logged out successfully"}
        assert client.get_cookie("access_token") is None
        assert client.get_cookie("refresh_token") is None


def test_unknown_route_uses_error_envelope(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/v1/auth/nope")

    assert response.status_code == 404
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["statusCode"] == 404
