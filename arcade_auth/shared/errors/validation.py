# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part is not None]
    return ".".join(parts) if parts else "body"


def describe_schema_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Client-safe summary of a failed request schema; input values are left out."""

    errors = [
        {"field": _field_name(tuple(err.get("loc", ()))), "type": err.get("type", "value_error")}
        for err in exc.errors(include_url=False, include_input=False)
    ]
    return {"fields": sorted({e["field"] for e in errors}), "errors": errors}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError("invalid request body", context=describe_schema_errors(exc)) from exc


__all__ = ["describe_schema_errors", "raise_validation_error"]
