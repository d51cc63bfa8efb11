# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-token gate for protected requests."""

from __future__ import annotations

from arcade_auth.domain.users.entities import TokenClaims
from arcade_auth.domain.users.exceptions import (
    InvalidTokenError,
    TokenRejectedError,
    TokenRequiredError,
)
from arcade_auth.domain.users.repositories import TokenService
from arcade_auth.shared.logging import logger

BEARER_SCHEME = "bearer"


def extract_bearer(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""

    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


class VerifyTokenUseCase:
    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, authorization: str | None) -> TokenClaims:
        token = extract_bearer(authorization)
        if token is None:
            raise TokenRequiredError()
        try:
            return self._tokens.verify(token)
        except InvalidTokenError as exc:
            logger.info("auth.gate: rejected bearer token")
            raise TokenRejectedError() from exc

    def execute_optional(self, authorization: str | None) -> TokenClaims | None:
        token = extract_bearer(authorization)
        if token is None:
            return None
        try:
            return self._tokens.verify(token)
        except InvalidTokenError:
            logger.debug("auth.gate: ignoring invalid bearer token on optional route")
            return None
