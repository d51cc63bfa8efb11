# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Flask decorators guarding routes with the bearer-token gate."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import cast

from flask import current_app, g, request

from arcade_auth.application.use_cases.users.verify_token import VerifyTokenUseCase
from arcade_auth.domain.users.entities import TokenClaims
from arcade_auth.shared.errors.base import AuthError
from arcade_auth.shared.logging import logger

EXTENSION_KEY = "arcade_auth"


def _verifier() -> VerifyTokenUseCase:
    container = current_app.extensions[EXTENSION_KEY]
    return cast(VerifyTokenUseCase, container.verify_token_use_case)


def current_user() -> TokenClaims | None:
    return getattr(g, "user", None)


def auth_required(f: Callable):
    @wraps(f)
    def inner(*a, **kw):
        try:
            claims = _verifier().execute(request.headers.get("Authorization"))
        except AuthError as exc:
            logger.warning(f"Auth failed ({exc.code}) on {request.method} {request.path}")
            raise
        g.user = claims
        g.user_id = claims.id
        logger.debug(f"Auth OK: user={claims.id} {request.method} {request.path}")
        return f(*a, **kw)

    return inner


def auth_optional(f: Callable):
    @wraps(f)
    def inner(*a, **kw):
        claims = _verifier().execute_optional(request.headers.get("Authorization"))
        g.user = claims
        g.user_id = claims.id if claims else None
        return f(*a, **kw)

    return inner


__all__ = ["EXTENSION_KEY", "auth_optional", "auth_required", "current_user"]
