# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from arcade_auth.domain.users.entities import AuthResult, TokenClaims
from arcade_auth.domain.users.exceptions import UserAlreadyExistsError
from arcade_auth.domain.users.policies import (
    require_credentials,
    validate_password,
    validate_username,
)
from arcade_auth.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from arcade_auth.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        store_timeout: float | None = None,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._store_timeout = store_timeout

    def execute(self, username: str | None, password: str | None) -> AuthResult:
        username, password = require_credentials(username, password)
        validate_password(password)
        validate_username(username)

        # Early exit only; the unique constraint in the store is what
        # actually guarantees uniqueness when two registrations race.
        if self._users.find_by_username(username, timeout=self._store_timeout):
            logger.info(f"auth.register: username taken username='{username}'")
            raise UserAlreadyExistsError()

        hashed = self._password_hasher.hash(password)
        user = self._users.add(username, hashed, timeout=self._store_timeout)

        claims = TokenClaims.for_user(user)
        token = self._tokens.issue(claims)
        logger.info(f"auth.register: ok user_id={user.id} username='{user.username}'")
        return AuthResult(user=claims, token=token)
