# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import re
import secrets
import time
from collections.abc import Mapping
from typing import Any

from flask import Flask, Response, g, request

from chat_backend.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,64}")

_HASHED_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key"})
_REDACTED_FIELDS = ("password", "token", "secret", "code")


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def _request_id() -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.fullmatch(supplied):
        return supplied
    return secrets.token_urlsafe(8)


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _HASHED_HEADERS else value
        for key, value in headers.items()
    }


def _safe_args(args: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: "<redacted>" if any(part in key.lower() for part in _REDACTED_FIELDS) else value
        for key, value in args.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """One access line per request, tagged with the request id.

    The id is taken from ``X-Request-ID`` when the caller sends a short URL-safe
    one, otherwise generated, and is echoed back on the response.
    """

    @app.before_request
    def _open_request() -> None:
        request_id = _request_id()
        set_correlation_id(request_id)
        g.request_id = request_id
        g.request_started = time.perf_counter()

        if debug_mode:
            logger.debug(
                f"-> {request.method} {request.path} ip={client_ip()} "
                f"args={_safe_args(request.args)} headers={_safe_headers(request.headers)} "
                f"bytes={request.content_length or 0}"
            )

    @app.after_request
    def _close_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        logger.info(
            f"{request.method} {request.path} -> {response.status_code} "
            f"in {elapsed_ms:.1f} ms ip={client_ip()}"
        )
        if "request_id" in g:
            response.headers.setdefault(REQUEST_ID_HEADER, g.request_id)
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"request aborted: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "client_ip", "configure_request_logging"]
