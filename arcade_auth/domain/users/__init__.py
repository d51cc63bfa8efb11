# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AuthResult, TokenClaims, User
from .exceptions import (
    HashingError,
    InvalidCredentialsError,
    InvalidTokenError,
    StoreTimeoutError,
    TokenRejectedError,
    TokenRequiredError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from .repositories import PasswordHasher, TokenService, UserRepository

__all__ = [
    "AuthResult",
    "HashingError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "PasswordHasher",
    "StoreTimeoutError",
    "TokenClaims",
    "TokenRejectedError",
    "TokenRequiredError",
    "TokenService",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserRepository",
]
