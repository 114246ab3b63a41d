# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from chat_backend.infrastructure.db import Database
from chat_backend.shared.logging import logger


class MiscController:
    def __init__(self, *, database: Database) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/v1/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"status": "ok"}
        try:
            self._database.ping()
            status["database"] = "ok"
        except Exception as exc:
            logger.opt(exception=exc).warning("health: database check failed")
            status["status"] = "degraded"
            status["database"] = "error"
            return jsonify(status), 503
        return jsonify(status), 200
