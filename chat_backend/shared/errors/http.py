# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from chat_backend.shared.logging import logger

from .base import AppError


def _envelope(payload: dict[str, Any]) -> dict[str, Any]:
    payload["timestamp"] = datetime.now(UTC).isoformat()
    payload["path"] = request.path
    return payload


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(_envelope(error.to_dict()))
    return response, error.status


def register_error_handler(
    app: Flask, *, default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.opt(exception=exc).error(
                f"Application error {exc.code} on {request.method} {request.path}"
            )
        else:
            logger.warning(
                f"Handled application error {exc.code} on {request.method} {request.path}"
            )
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        if exc.code is None or exc.code < 400:
            return exc
        status = HTTPStatus(exc.code)
        payload = {
            "success": False,
            "statusCode": exc.code,
            "error": status.name.lower(),
            "message": status.phrase,
        }
        return jsonify(_envelope(payload)), exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.opt(exception=exc).error(
            f"Unhandled exception: {type(exc).__name__} on {request.method} {request.path}"
        )
        payload = {
            "success": False,
            "statusCode": int(default_status),
            "error": "internal_error",
            "message": "Internal server error",
        }
        return jsonify(_envelope(payload)), default_status
