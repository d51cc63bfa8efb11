# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Scrubs credentials out of log messages before any sink sees them."""

from __future__ import annotations

import re
from typing import Any, NamedTuple

MASK = "***REDACTED***"


class Redaction(NamedTuple):
    pattern: re.Pattern[str]
    replacement: str


def _rule(pattern: str, replacement: str, flags: int = re.IGNORECASE) -> Redaction:
    return Redaction(re.compile(pattern, flags), replacement)


# Order matters: whole-header rules run before the narrower token rules.
REDACTIONS: tuple[Redaction, ...] = (
    _rule(r"(authorization\s*:\s*['\"]?)([^'\"\n]{10,})(['\"]?)", rf"\1{MASK}\3"),
    _rule(r"(bearer\s+)([A-Za-z0-9_\-.]{10,})", rf"\1{MASK}"),
    _rule(r"\beyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+", "***JWT***", 0),
    _rule(r"((?:jwt[_-]?)?secret(?:[_-]?key)?\s*[:=]\s*['\"]?)([^'\"\s]{6,})", rf"\1{MASK}"),
    _rule(r"(\btoken['\"]?\s*[:=]\s*['\"]?)([A-Za-z0-9_\-.]{20,})", rf"\1{MASK}"),
    _rule(r"(\bpass(?:word|wd)?['\"]?\s*[:=]\s*['\"]?)([^'\"\s,}]+)", rf"\1{MASK}"),
    _rule(r"\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}", "***BCRYPT***", 0),
    _rule(r"(\w+(?:\+\w+)?://[^:/@\s]+:)([^@\s]+)(@)", rf"\1{MASK}\3"),
)


def sanitize_message(message: str) -> str:
    for redaction in REDACTIONS:
        message = redaction.pattern.sub(redaction.replacement, message)
    return message


def redact_record(record: dict[str, Any]) -> None:
    """loguru patcher hook; rewrites ``record["message"]`` in place."""

    message = record.get("message")
    if message:
        record["message"] = sanitize_message(message)


__all__ = ["REDACTIONS", "redact_record", "sanitize_message"]
