# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    password_hash: str
    created_at: datetime | None
    email: str | None = None


@dataclass(slots=True, frozen=True)
class TokenClaims:
    """Identity carried inside an access token."""

    id: int
    username: str

    @classmethod
    def for_user(cls, user: User) -> TokenClaims:
        return cls(id=user.id, username=user.username)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}


@dataclass(slots=True, frozen=True)
class AuthResult:
    """Outcome of a successful registration or login."""

    user: TokenClaims
    token: str

    def to_dict(self) -> dict[str, Any]:
        return {"user": self.user.to_dict(), "token": self.token}
