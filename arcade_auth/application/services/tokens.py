# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, time-bounded access tokens (JWT, HS256)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from arcade_auth.domain.users.entities import TokenClaims
from arcade_auth.domain.users.exceptions import InvalidTokenError
from arcade_auth.domain.users.repositories import TokenService
from arcade_auth.shared.logging import logger

ALGORITHM = "HS256"
DEFAULT_LIFETIME = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    def __init__(
        self,
        secret: str,
        *,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret = secret
        self._lifetime = lifetime
        self._clock = clock

    def issue(self, claims: TokenClaims) -> str:
        issued_at = self._clock()
        payload = {
            "id": claims.id,
            "username": claims.username,
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        # Every failure collapses into the same error so callers cannot tell
        # a forged token from an expired or garbled one.
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require_exp": True, "require_iat": True},
            )
        except (JWTError, AttributeError, TypeError, ValueError) as exc:
            logger.debug(f"tokens.verify: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        # jose still accepts a token in the second that equals ``exp``.
        if payload["exp"] <= self._clock().timestamp():
            logger.debug("tokens.verify: rejected (expired)")
            raise InvalidTokenError()

        user_id = payload.get("id")
        username = payload.get("username")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            logger.debug("tokens.verify: rejected (bad id claim)")
            raise InvalidTokenError()
        if not isinstance(username, str) or not username:
            logger.debug("tokens.verify: rejected (bad username claim)")
            raise InvalidTokenError()
        return TokenClaims(id=user_id, username=username)
