from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from arcade_auth.app import create_app
from arcade_auth.application.services.tokens import JwtTokenService
from arcade_auth.domain.users.entities import User
from arcade_auth.domain.users.exceptions import UserAlreadyExistsError
from arcade_auth.domain.users.repositories import PasswordHasher, UserRepository
from arcade_auth.interfaces.http.auth_gate import EXTENSION_KEY
from arcade_auth.shared.config import AppConfig, DatabaseConfig, SecurityConfig

TEST_SECRET = "unit-test-signing-secret-0123456789"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1

    def find_by_username(self, username: str, *, timeout: float | None = None) -> User | None:
        return self._users.get(username)

    def find_by_id(self, user_id: int, *, timeout: float | None = None) -> User | None:
        return next((u for u in self._users.values() if u.id == user_id), None)

    def add(self, username: str, password_hash: str, *, timeout: float | None = None) -> User:
        if username in self._users:
            raise UserAlreadyExistsError()
        new_user = User(
            id=self._seq,
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(UTC),
        )
        self._seq += 1
        self._users[new_user.username] = new_user
        return new_user


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def token_service() -> JwtTokenService:
    return JwtTokenService(TEST_SECRET)


def make_config(tmp_path: Path, **overrides) -> AppConfig:
    database = DatabaseConfig(url=f"sqlite:///{tmp_path / 'auth.db'}", statement_timeout=2.0)
    security = overrides.pop("security", SecurityConfig(enable_rate_limit=False))
    return AppConfig(
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        database=database,
        security=security,
        **overrides,
    )


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return make_config(tmp_path)


@pytest.fixture()
def app(app_config: AppConfig) -> Iterator[Flask]:
    flask_app = create_app(app_config)
    yield flask_app
    flask_app.extensions[EXTENSION_KEY].close()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
