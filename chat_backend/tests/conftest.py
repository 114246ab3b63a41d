from __future__ import annotations

import os
import tempfile
from pathlib import Path

os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("ENABLE_RATE_LIMIT", "0")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "chat_backend_tests.log"))
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{os.path.join(tempfile.gettempdir(), 'chat_backend_tests.db')}"
)

import pytest  # noqa: E402

from chat_backend.shared.config import load_config  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_config():
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture()
def database_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    url = f"sqlite:///{tmp_path / 'chat.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url
