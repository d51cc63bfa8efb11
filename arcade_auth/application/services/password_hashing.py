"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from arcade_auth.domain.users.exceptions import HashingError
from arcade_auth.domain.users.repositories import PasswordHasher

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasher):
    """Salted, adaptive-cost password verifier.

    Every call to :meth:`hash` draws a fresh salt, so equal passwords produce
    different stored values. The result is the self-describing modular crypt
    string (``$2b$<cost>$<salt><digest>``), which carries everything
    :meth:`verify` needs.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        try:
            encoded = password.encode("utf-8")
            if len(encoded) > MAX_PASSWORD_BYTES:
                raise ValueError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
            return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")
        except (ValueError, TypeError, AttributeError) as exc:
            raise HashingError(f"error hashing password: {exc}") from exc

    def verify(self, password: str, hashed: str) -> bool:
        try:
            stored = hashed.encode("utf-8")
        except (TypeError, AttributeError, UnicodeError) as exc:
            raise HashingError("stored password hash is malformed") from exc

        try:
            candidate = password.encode("utf-8")
        except (TypeError, AttributeError, UnicodeError):
            return False
        if len(candidate) > MAX_PASSWORD_BYTES:
            return False

        try:
            return bcrypt.checkpw(candidate, stored)
        except ValueError as exc:
            raise HashingError("stored password hash is malformed") from exc
