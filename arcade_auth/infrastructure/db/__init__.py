# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .migrations import MIGRATIONS, Migration, apply_migrations, init_db
from .session import Base, Database, create_db_engine

__all__ = [
    "Base",
    "Database",
    "MIGRATIONS",
    "Migration",
    "apply_migrations",
    "create_db_engine",
    "init_db",
]
