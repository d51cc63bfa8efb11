# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Input rules for usernames and passwords."""

from __future__ import annotations

import re

from arcade_auth.shared.errors.base import ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6

_WHITESPACE = re.compile(r"\s")


def require_credentials(username: str | None, password: str | None) -> tuple[str, str]:
    if not username or not password:
        raise ValidationError("missing fields")
    return username, password


def validate_password(password: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError("password too short", context={"min_length": PASSWORD_MIN_LENGTH})


def validate_username(username: str) -> None:
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH or _WHITESPACE.search(
        username
    ):
        raise ValidationError(
            "invalid username",
            context={
                "min_length": USERNAME_MIN_LENGTH,
                "max_length": USERNAME_MAX_LENGTH,
                "whitespace_allowed": False,
            },
        )
