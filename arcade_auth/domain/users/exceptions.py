# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from arcade_auth.shared.errors.base import (
    AuthError,
    ConflictError,
    InfrastructureError,
    NotFoundError,
)


class UserAlreadyExistsError(ConflictError):
    default_code = "user_already_exists"
    default_message = "username exists"


class UserNotFoundError(NotFoundError):
    default_code = "user_not_found"
    default_message = "user not found"


class InvalidCredentialsError(AuthError):
    default_code = "invalid_credentials"
    default_message = "invalid credentials"


class TokenRequiredError(AuthError):
    default_code = "token_required"
    default_message = "token required"


class TokenRejectedError(AuthError):
    default_code = "invalid_token"
    default_status = HTTPStatus.FORBIDDEN
    default_message = "invalid or expired token"


class HashingError(InfrastructureError):
    def __init__(self, message: str = "password hashing failed") -> None:
        super().__init__("hashing_error", message=message)


class InvalidTokenError(InfrastructureError):
    """Signature, payload or expiry check failed; the cause is not exposed."""

    def __init__(self) -> None:
        super().__init__("invalid_token", message="invalid or expired token")


class StoreTimeoutError(InfrastructureError):
    """The caller stopped waiting; the store call itself may still complete.

    After a timed-out insert the row can be committed in the background, so a
    retried registration may see 409 for the caller's own account.
    """

    retryable = True

    def __init__(self, operation: str, timeout: float | None = None) -> None:
        context: dict[str, object] = {"operation": operation}
        if timeout is not None:
            context["timeout_seconds"] = timeout
        super().__init__(
            "store_timeout",
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            context=context,
            message="user store did not respond in time",
        )
