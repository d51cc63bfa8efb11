# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from dataclasses import dataclass

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from arcade_auth.infrastructure.db import Database
from arcade_auth.infrastructure.db.migrations import USERS_TABLE
from arcade_auth.shared.logging import logger


@dataclass(frozen=True, slots=True)
class DatabaseHealth:
    ok: bool
    latency_ms: float
    schema_ready: bool = False
    error: str | None = None

    @property
    def status(self) -> str:
        if not self.ok:
            return "unavailable"
        return "ok" if self.schema_ready else "schema_missing"


def probe_database(database: Database) -> DatabaseHealth:
    started = time.perf_counter()
    try:
        with database.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            schema_ready = inspect(connection).has_table(USERS_TABLE)
    except SQLAlchemyError as exc:
        logger.warning(f"health: database probe failed ({type(exc).__name__})")
        return DatabaseHealth(
            ok=False,
            latency_ms=(time.perf_counter() - started) * 1000.0,
            error=type(exc).__name__,
        )
    return DatabaseHealth(
        ok=True,
        latency_ms=(time.perf_counter() - started) * 1000.0,
        schema_ready=schema_ready,
    )


__all__ = ["DatabaseHealth", "probe_database"]
