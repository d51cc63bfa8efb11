# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Convenience entrypoint for applying schema migrations."""

from __future__ import annotations

import argparse

from arcade_auth.infrastructure.db import MIGRATIONS, Database, init_db
from arcade_auth.shared.config import DatabaseConfig, load_config
from arcade_auth.shared.logging import setup_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Apply all migrations to the auth database")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL; defaults to DATABASE_URL from the environment",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the known migration steps and exit",
    )
    args = parser.parse_args(argv)

    if args.list:
        for migration in MIGRATIONS:
            print(migration.name)
        return

    setup_logging()
    config = load_config()
    db_config = config.database
    if args.database_url:
        db_config = DatabaseConfig(url=args.database_url)  # type: ignore[call-arg]

    database = Database(db_config)
    try:
        applied = init_db(database, config.resilience)
    finally:
        database.dispose()

    if applied:
        print(f"Applied: {', '.join(applied)}")
    else:
        print("Schema already up to date")


if __name__ == "__main__":
    main()
