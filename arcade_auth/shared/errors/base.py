# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None
    message: str | None = None

    retryable: ClassVar[bool] = False

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "error": self.code}
        if self.message:
            payload["message"] = self.message
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(type(self), "default_code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(type(self), "default_status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(
            "str | None", getattr(type(self), "default_message", None)
        )
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            context=context,
            message=resolved_message,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context, message=message)


class ValidationError(AppError):
    def __init__(
        self,
        message: str = "invalid request",
        *,
        code: str = "validation_error",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            context=context,
            message=message,
        )


class ConflictError(DomainError):
    default_code = "conflict"
    default_status = HTTPStatus.CONFLICT


class AuthError(DomainError):
    default_code = "auth_error"
    default_status = HTTPStatus.UNAUTHORIZED


class NotFoundError(DomainError):
    default_code = "not_found"
    default_status = HTTPStatus.NOT_FOUND


__all__ = [
    "AppError",
    "AuthError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "ValidationError",
]
