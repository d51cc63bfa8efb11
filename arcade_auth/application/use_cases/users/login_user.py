# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from arcade_auth.domain.users.entities import AuthResult, TokenClaims
from arcade_auth.domain.users.exceptions import InvalidCredentialsError
from arcade_auth.domain.users.policies import require_credentials
from arcade_auth.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from arcade_auth.shared.logging import logger


class LoginUserUseCase:
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

        user = self._users.find_by_username(username, timeout=self._store_timeout)
        if user is None:
            logger.info(f"auth.login: invalid credentials username='{username}' (unknown user)")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: invalid credentials username='{username}' (bad password)")
            raise InvalidCredentialsError()

        claims = TokenClaims.for_user(user)
        token = self._tokens.issue(claims)
        logger.info(f"auth.login: ok user_id={user.id} username='{user.username}'")
        return AuthResult(user=claims, token=token)
