from __future__ import annotations

import pytest
from flask import Flask

from chat_backend.app import create_app
from chat_backend.domain.users.entities import TokenKind, User
from chat_backend.domain.users.exceptions import UserAlreadyExistsError
from chat_backend.infrastructure.container import Container
from chat_backend.shared.config import (AppConfig, AuthConfig, DatabaseConfig,
                                       SecurityConfig, load_config)


class RecordingSender:
    def __init__(self) -> None:
        self.codes: dict[str, str] = {}

    def send_verification_code(self, email: str, code: str, name: str) -> None:
        self.codes[email] = code


@pytest.fixture()
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture()
def container(database_url: str, sender: RecordingSender):
    container = Container(load_config())
    container.verification_sender = sender
    yield container
    container.database.drop_all()
    container.close()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container)


ALICE = {"email": "alice@example.com", "password": "Passw0rd!", "name": "Alice"}


def test_health_reports_database(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "database": "ok"}


def test_sign_up_verify_sign_in_refresh_logout_flow(
    app: Flask, container: Container, sender: RecordingSender
) -> None:
    with app.test_client() as client:
        sign_up = client.post("/api/v1/auth/sign-up", json=ALICE)
        assert sign_up.status_code == 201
        assert sign_up.get_json()["email"] == "alice@example.com"
        code = sender.codes["alice@example.com"]
        assert len(code) == 6 and code.isdigit()

        stored = container.user_repository.find_by_email("alice@example.com")
        assert stored is not None
        assert stored.is_email_verified is False
        assert stored.password_hash != ALICE["password"]

        early = client.post(
            "/api/v1/auth/sign-in",
            json={"email": ALICE["email"], "password": ALICE["password"]},
        )
        assert early.status_code == 403

        wrong_code = "000000" if code != "000000" else "111111"
        wrong = client.post(
            "/api/v1/auth/verify-email", json={"email": ALICE["email"], "code": wrong_code}
        )
        assert wrong.status_code == 401
        assert wrong.get_json()["error"] == "invalid_verification_code"

        verify = client.post(
            "/api/v1/auth/verify-email", json={"email": ALICE["email"], "code": code}
        )
        assert verify.status_code == 200
        body = verify.get_json()
        assert body["user"]["email"] == "alice@example.com"
        assert body["user"]["name"] == "Alice"
        assert "avatarUrl" in body["user"]
        assert client.get_cookie("access_token") is not None
        assert client.get_cookie("refresh_token") is not None

        verified = container.user_repository.find_by_email("alice@example.com")
        assert verified.is_email_verified is True
        assert verified.email_verification_code is None

        again = client.post(
            "/api/v1/auth/verify-email", json={"email": ALICE["email"], "code": code}
        )
        assert again.status_code == 409

        sign_in = client.post(
            "/api/v1/auth/sign-in",
            json={"email": ALICE["email"], "password": ALICE["password"]},
        )
        assert sign_in.status_code == 200
        assert sign_in.get_json()["user"]["id"] == verified.id

        old_refresh = client.get_cookie("refresh_token").value
        refresh = client.post("/api/v1/auth/refresh")
        assert refresh.status_code == 200
        assert client.get_cookie("refresh_token").value != old_refresh
        refreshed = container.token_issuer.validate(
            client.get_cookie("access_token").value, TokenKind.ACCESS
        )
        assert refreshed.subject == verified.id

        logout = client.post("/api/v1/auth/logout")
        assert logout.status_code == 200
        assert client.get_cookie("access_token") is None
        assert client.get_cookie("refresh_token") is None

        after = client.post("/api/v1/auth/refresh")
        assert after.status_code == 401


def test_duplicate_sign_up_conflicts(app: Flask) -> None:
    with app.test_client() as client:
        assert client.post("/api/v1/auth/sign-up", json=ALICE).status_code == 201
        duplicate = client.post("/api/v1/auth/sign-up", json=ALICE)

    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "user_already_exists"


def test_resend_code_replaces_code(app: Flask, sender: RecordingSender) -> None:
    with app.test_client() as client:
        client.post("/api/v1/auth/sign-up", json=ALICE)
        first = sender.codes["alice@example.com"]

        resend = client.post("/api/v1/auth/resend-code", json={"email": ALICE["email"]})
        assert resend.status_code == 200
        second = sender.codes["alice@example.com"]

        if first != second:
            stale = client.post(
                "/api/v1/auth/verify-email", json={"email": ALICE["email"], "code": first}
            )
            assert stale.status_code == 401

        ok = client.post(
            "/api/v1/auth/verify-email", json={"email": ALICE["email"], "code": second}
        )
        assert ok.status_code == 200


def test_unknown_email_paths(app: Flask) -> None:
    with app.test_client() as client:
        sign_in = client.post(
            "/api/v1/auth/sign-in", json={"email": "ghost@example.com", "password": "x"}
        )
        verify = client.post(
            "/api/v1/auth/verify-email", json={"email": "ghost@example.com", "code": "123456"}
        )
        resend = client.post("/api/v1/auth/resend-code", json={"email": "ghost@example.com"})

    assert sign_in.status_code == 401
    assert sign_in.get_json()["error"] == "invalid_credentials"
    assert verify.status_code == 401
    assert resend.status_code == 401


def test_refresh_with_garbage_cookie_is_forbidden(app: Flask) -> None:
    with app.test_client() as client:
        client.set_cookie("refresh_token", "garbage")
        response = client.post("/api/v1/auth/refresh")

    assert response.status_code == 403


def test_responses_carry_request_id(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def _explicit_config(database_url: str, *, rate_limited: bool) -> AppConfig:
    return AppConfig(
        auth=AuthConfig(
            JWT_ACCESS_SECRET="explicit-access-secret-0123456789abcdef",
            JWT_REFRESH_SECRET="explicit-refresh-secret-0123456789abcdef",
        ),
        security=SecurityConfig(ENABLE_RATE_LIMIT=rate_limited),
        database=DatabaseConfig(DATABASE_URL=database_url),
    )


@pytest.fixture()
def explicit_app(database_url: str, sender: RecordingSender, monkeypatch: pytest.MonkeyPatch):
    def build(*, rate_limited: bool) -> Flask:
        monkeypatch.delenv("JWT_ACCESS_SECRET", raising=False)
        monkeypatch.delenv("JWT_REFRESH_SECRET", raising=False)
        container = Container(_explicit_config(database_url, rate_limited=rate_limited))
        container.verification_sender = sender
        built.append(container)
        return create_app(container)

    built: list[Container] = []
    yield build
    for container in built:
        container.database.drop_all()
        container.close()


def test_app_runs_on_injected_config_without_environment(explicit_app) -> None:
    app = explicit_app(rate_limited=False)

    with app.test_client() as client:
        sign_up = client.post("/api/v1/auth/sign-up", json=ALICE)
        sign_in = client.post(
            "/api/v1/auth/sign-in",
            json={"email": ALICE["email"], "password": ALICE["password"]},
        )
        resend = client.post("/api/v1/auth/resend-code", json={"email": ALICE["email"]})

    assert sign_up.status_code == 201
    assert sign_in.status_code == 403
    assert resend.status_code == 200


def test_verify_email_is_rate_limited(explicit_app) -> None:
    app = explicit_app(rate_limited=True)

    with app.test_client() as client:
        client.post("/api/v1/auth/sign-up", json=ALICE)
        statuses = [
            client.post(
                "/api/v1/auth/verify-email",
                json={"email": ALICE["email"], "code": f"{100000 + attempt}"},
            ).status_code
            for attempt in range(6)
        ]

    assert statuses[-1] == 429
    assert 429 not in statuses[:5]


def test_store_rejects_second_account_with_same_email(container: Container) -> None:
    container.database.create_all()
    user = User(id="", email="alice@example.com", password_hash="hash", name="Alice")
    container.user_repository.add(user)

    with pytest.raises(UserAlreadyExistsError):
        container.user_repository.add(user)


def test_racing_sign_up_loses_with_conflict(
    app: Flask, container: Container, monkeypatch: pytest.MonkeyPatch
) -> None:
    with app.test_client() as client:
        assert client.post("/api/v1/auth/sign-up", json=ALICE).status_code == 201
        # The second request passed its lookup before the first one committed.
        monkeypatch.setattr(container.user_repository, "find_by_email", lambda email: None)
        loser = client.post("/api/v1/auth/sign-up", json={**ALICE, "name": "Other"})

    assert loser.status_code == 409
    assert loser.get_json()["error"] == "user_already_exists"


def test_unknown_email_is_indistinguishable_from_bad_credentials(app: Flask) -> None:
    with app.test_client() as client:
        verify = client.post(
            "/api/v1/auth/verify-email", json={"email": "ghost@example.com", "code": "123456"}
        )
        resend = client.post("/api/v1/auth/resend-code", json={"email": "ghost@example.com"})

    for response in (verify, resend):
        payload = response.get_json()
        assert payload["error"] == "invalid_credentials"
        assert "not found" not in payload["message"].lower()


def test_unsafe_request_id_is_replaced(app: Flask) -> None:
    with app.test_client() as client:
        injected = client.get("/api/v1/health", headers={"X-Request-ID": "bad id <script>"})
        oversized = client.get("/api/v1/health", headers={"X-Request-ID": "a" * 65})

    for response in (injected, oversized):
        request_id = response.headers["X-Request-ID"]
        assert request_id not in ("bad id <script>", "a" * 65)
        assert 0 < len(request_id) <= 64
