# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from arcade_auth.shared.config import DatabaseConfig
from arcade_auth.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory(url: str) -> bool:
    return make_url(url).database in (None, "", ":memory:")


def _ensure_sqlite_directory(url: str) -> None:
    if not _is_memory(url):
        Path(make_url(url).database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def create_db_engine(config: DatabaseConfig) -> Engine:
    connect_args: dict[str, object] = {}
    pool_kwargs: dict[str, object] = {
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
        "pool_timeout": config.pool_timeout,
    }
    if _is_sqlite(config.url):
        _ensure_sqlite_directory(config.url)
        connect_args = {
            "check_same_thread": False,
            "timeout": config.statement_timeout,
        }
        if _is_memory(config.url):
            # One shared connection, otherwise every thread sees an empty database.
            pool_kwargs = {"poolclass": StaticPool}

    engine = create_engine(
        config.url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
        **pool_kwargs,
    )

    if _is_sqlite(config.url):

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_conn, _):
            cur = dbapi_conn.cursor()
            try:
                cur.execute("PRAGMA journal_mode=WAL;")
                cur.execute("PRAGMA synchronous=NORMAL;")
                cur.execute(f"PRAGMA busy_timeout={int(config.statement_timeout * 1000)};")
            finally:
                cur.close()

    return engine


class Database:
    """Engine plus session factory, created once per application and passed around."""

    def __init__(self, config: DatabaseConfig, *, engine: Engine | None = None) -> None:
        self.config = config
        self.engine = engine or create_db_engine(config)
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    def session(self) -> Session:
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        logger.debug("db.session: opened session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed session")
        except Exception:
            logger.debug("db.session: error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()
            logger.debug("db.session: closed session")

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("db: engine disposed")
