# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Ordered, idempotent schema migrations.

Each step inspects the live schema and only creates what is missing, so the
whole list can be applied on every start without touching existing data.
Tables created by older deployments may lack columns or the unique index on
``username``; the later steps bring them up to date.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import Connection, inspect, text
from sqlalchemy.exc import OperationalError

from arcade_auth.infrastructure.db.models import User
from arcade_auth.infrastructure.db.session import Database
from arcade_auth.infrastructure.resilience import call_with_retries
from arcade_auth.shared.config import ResilienceConfig
from arcade_auth.shared.logging import logger

USERS_TABLE = User.__tablename__
USERNAME_UNIQUE_INDEX = "ux_users_username"


@dataclass(frozen=True, slots=True)
class Migration:
    name: str
    apply: Callable[[Connection], bool]


def _create_users_table(connection: Connection) -> bool:
    if inspect(connection).has_table(USERS_TABLE):
        return False
    User.__table__.create(connection)
    return True


def _add_column(column: str, ddl_type: str) -> Callable[[Connection], bool]:
    def _apply(connection: Connection) -> bool:
        columns = {c["name"] for c in inspect(connection).get_columns(USERS_TABLE)}
        if column in columns:
            return False
        connection.execute(text(f"ALTER TABLE {USERS_TABLE} ADD COLUMN {column} {ddl_type}"))
        return True

    return _apply


def _ensure_username_unique(connection: Connection) -> bool:
    inspector = inspect(connection)
    unique_sets = [tuple(c["column_names"]) for c in inspector.get_unique_constraints(USERS_TABLE)]
    unique_sets += [
        tuple(i["column_names"]) for i in inspector.get_indexes(USERS_TABLE) if i.get("unique")
    ]
    if ("username",) in unique_sets:
        return False
    connection.execute(
        text(f"CREATE UNIQUE INDEX IF NOT EXISTS {USERNAME_UNIQUE_INDEX} ON {USERS_TABLE} (username)")
    )
    return True


MIGRATIONS: tuple[Migration, ...] = (
    Migration("0001_create_users", _create_users_table),
    Migration("0002_users_email", _add_column("email", "VARCHAR(255)")),
    Migration("0003_users_created_at", _add_column("created_at", "TIMESTAMP")),
    Migration("0004_users_username_unique", _ensure_username_unique),
)


def apply_migrations(
    connection: Connection, migrations: tuple[Migration, ...] = MIGRATIONS
) -> list[str]:
    """Apply every step in order and return the names of those that changed the schema."""

    applied: list[str] = []
    for migration in migrations:
        try:
            changed = migration.apply(connection)
        except Exception:
            logger.exception(f"db.migrate: step {migration.name} failed")
            raise
        if changed:
            logger.info(f"db.migrate: applied {migration.name}")
            applied.append(migration.name)
        else:
            logger.debug(f"db.migrate: {migration.name} already present")
    return applied


def init_db(database: Database, resilience: ResilienceConfig | None = None) -> list[str]:
    """Bring the schema up to date, retrying while the database is unreachable."""

    def _migrate() -> list[str]:
        with database.engine.begin() as connection:
            return apply_migrations(connection)

    if resilience is None:
        applied = _migrate()
    else:
        applied = call_with_retries(_migrate, config=resilience, retry_on=(OperationalError,))
    logger.info(f"Database schema ensured (applied={applied or 'none'})")
    return applied
