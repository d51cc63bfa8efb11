# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from threading import Lock

from flask import Flask, jsonify, request

from arcade_auth.shared.config import SecurityConfig
from arcade_auth.shared.logging import logger

from .request_logger import client_ip

AUTH_PATH_PREFIX = "/api/auth/"


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(self, limit: int, window_seconds: float, *, sweep_every: int = 256) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._sweep_every = max(1, int(sweep_every))
        self._calls = 0
        self._buckets: dict[str, Bucket] = {}
        self._lock = Lock()

    def _prune(self, bucket: Bucket, now: float) -> None:
        while bucket.timestamps and (now - bucket.timestamps[0]) > self._window:
            bucket.timestamps.popleft()

    def _sweep(self, now: float) -> None:
        for key in list(self._buckets):
            bucket = self._buckets[key]
            self._prune(bucket, now)
            if not bucket.timestamps:
                del self._buckets[key]

    def allow(self, key: str) -> bool:
        now = time.monotonic()
        with self._lock:
            self._calls += 1
            # Keys that never come back are only dropped by the periodic sweep.
            if self._calls % self._sweep_every == 0:
                self._sweep(now)

            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = Bucket(deque(maxlen=self._limit))
            self._prune(bucket, now)
            if len(bucket.timestamps) >= self._limit:
                return False
            bucket.timestamps.append(now)
            return True

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._buckets)


def _limited(message: str):
    return jsonify({"success": False, "error": "rate_limited", "message": message}), 429


def configure_rate_limiting(app: Flask, security: SecurityConfig) -> None:
    """Apply a global per-client limit and a stricter one to the auth endpoints."""

    if not security.enable_rate_limit:
        logger.warning("rate_limit: disabled by configuration")
        return

    global_limiter = InMemoryRateLimiter(security.global_rate_limit, security.rate_limit_window)
    auth_limiter = InMemoryRateLimiter(security.auth_rate_limit, security.rate_limit_window)
    app.extensions["arcade_auth.rate_limiters"] = (global_limiter, auth_limiter)

    @app.before_request
    def _enforce_rate_limits():
        if request.method == "OPTIONS":
            return None
        key = client_ip()
        if not global_limiter.allow(key):
            logger.warning(f"rate_limit: global limit hit by {key} on {request.path}")
            return _limited("Too many requests, please try again later")
        if request.path.startswith(AUTH_PATH_PREFIX) and not auth_limiter.allow(key):
            logger.warning(f"rate_limit: auth limit hit by {key} on {request.path}")
            return _limited("Too many authentication attempts, please try again later")
        return None


__all__ = ["InMemoryRateLimiter", "configure_rate_limiting"]
