# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from arcade_auth.domain.users.entities import User as DomainUser
from arcade_auth.domain.users.exceptions import StoreTimeoutError, UserAlreadyExistsError
from arcade_auth.domain.users.repositories import UserRepository
from arcade_auth.infrastructure.db.models import User
from arcade_auth.infrastructure.db.session import Database
from arcade_auth.infrastructure.resilience import BoundedExecutor, CallTimeoutError
from arcade_auth.shared.logging import logger

T = TypeVar("T")

_LOCK_MARKERS = ("database is locked", "lock timeout", "statement timeout", "canceling statement")


def _is_lock_timeout(exc: OperationalError) -> bool:
    text = str(exc.orig if exc.orig is not None else exc).lower()
    return any(marker in text for marker in _LOCK_MARKERS)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=row.created_at,
        email=row.email,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(
        self,
        database: Database,
        *,
        executor: BoundedExecutor | None = None,
        default_timeout: float | None = None,
    ) -> None:
        self._database = database
        self._executor = executor or BoundedExecutor()
        self._default_timeout = default_timeout

    def _run(self, operation: str, func: Callable[[], T], timeout: float | None) -> T:
        timeout = timeout if timeout is not None else self._default_timeout
        try:
            return self._executor.call(func, timeout=timeout)
        except (CallTimeoutError, PoolTimeoutError) as exc:
            logger.warning(f"users.store: {operation} timed out after {timeout}s")
            raise StoreTimeoutError(operation, timeout) from exc
        except OperationalError as exc:
            if _is_lock_timeout(exc):
                logger.warning(f"users.store: {operation} blocked by a lock")
                raise StoreTimeoutError(operation, timeout) from exc
            raise

    def find_by_username(self, username: str, *, timeout: float | None = None) -> DomainUser | None:
        def _query() -> DomainUser | None:
            with self._database.session_scope() as session:
                row = session.query(User).filter(User.username == username).first()
                return _to_domain(row) if row else None

        return self._run("find_by_username", _query, timeout)

    def find_by_id(self, user_id: int, *, timeout: float | None = None) -> DomainUser | None:
        def _query() -> DomainUser | None:
            with self._database.session_scope() as session:
                row = session.get(User, user_id)
                return _to_domain(row) if row else None

        return self._run("find_by_id", _query, timeout)

    def add(self, username: str, password_hash: str, *, timeout: float | None = None) -> DomainUser:
        def _insert() -> DomainUser:
            with self._database.session_scope() as session:
                row = User(username=username, password_hash=password_hash)
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)

        try:
            user = self._run("add", _insert, timeout)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same name.
            logger.info(f"users.store: unique constraint rejected username='{username}'")
            raise UserAlreadyExistsError() from exc
        logger.debug(f"users.store: inserted user_id={user.id}")
        return user
