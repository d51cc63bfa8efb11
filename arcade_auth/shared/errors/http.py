# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from arcade_auth.shared.logging import logger

from .base import AppError

_HTTP_MESSAGES: dict[int, str] = {
    HTTPStatus.NOT_FOUND: "Route not found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method not allowed",
    HTTPStatus.REQUEST_ENTITY_TOO_LARGE: "Request body too large",
}


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    return response, error.status


def register_error_handlers(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            # Internal failures are logged in full; clients only see the code.
            logger.opt(exception=exc).error(
                f"Application error {exc.code} on {request.method} {request.path}"
            )
            payload = {"success": False, "error": exc.code}
            if exc.retryable:
                payload["retryable"] = True
            return jsonify(payload), exc.status
        logger.warning(f"Handled application error {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        status = exc.code or default_status
        name = (exc.name or "error").lower().replace(" ", "_")
        payload = {
            "success": False,
            "error": name,
            "message": _HTTP_MESSAGES.get(status, exc.name),
        }
        return jsonify(payload), status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        user_id = getattr(g, "user_id", None)
        remote = request.remote_addr or "unknown"

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {remote}, user={user_id}, "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.opt(exception=exc).error(
                f"Error: {type(exc).__name__} on {request.method} {request.path}"
            )

        response = jsonify(
            {"success": False, "error": "internal_error", "message": "Internal server error"}
        )
        return response, default_status


__all__ = ["handle_app_error", "register_error_handlers"]
