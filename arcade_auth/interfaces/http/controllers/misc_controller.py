# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint, jsonify

from arcade_auth.infrastructure.db import Database
from arcade_auth.infrastructure.health import probe_database


class MiscController:
    def __init__(self, *, database: Database) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        db = probe_database(self._database)
        healthy = db.ok and db.schema_ready
        payload = {
            "success": healthy,
            "message": "Auth server is running",
            "timestamp": datetime.now(UTC).isoformat(),
            "database": db.status,
            "database_latency_ms": round(db.latency_ms, 2),
        }
        return jsonify(payload), 200 if healthy else 503
