# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from arcade_auth.application.use_cases.users.login_user import LoginUserUseCase
from arcade_auth.application.use_cases.users.register_user import RegisterUserUseCase
from arcade_auth.domain.users.exceptions import TokenRequiredError, UserNotFoundError
from arcade_auth.domain.users.repositories import UserRepository
from arcade_auth.interfaces.http.auth_gate import auth_optional, auth_required, current_user
from arcade_auth.interfaces.http.dto.auth import LoginRequestDTO, RegisterRequestDTO
from arcade_auth.shared.errors.validation import raise_validation_error


def _request_payload() -> Any:
    payload = request.get_json(silent=True)
    if payload is None and request.form:
        payload = request.form.to_dict()
    return payload if payload is not None else {}


def _parse(dto_type: type[BaseModel]) -> Any:
    try:
        return dto_type.model_validate(_request_payload())
    except PydanticValidationError as exc:
        raise_validation_error(exc)


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        users: UserRepository,
        store_timeout: float | None = None,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._users = users
        self._store_timeout = store_timeout

    def register(self) -> tuple[Response, int]:
        dto = _parse(RegisterRequestDTO)
        result = self._register_use_case.execute(dto.username, dto.password)
        payload = {"success": True, "message": "User registered successfully", **result.to_dict()}
        return jsonify(payload), 201

    def login(self) -> tuple[Response, int]:
        dto = _parse(LoginRequestDTO)
        result = self._login_use_case.execute(dto.username, dto.password)
        payload = {"success": True, "message": "Login successful", **result.to_dict()}
        return jsonify(payload), 200

    @auth_required
    def me(self) -> tuple[Response, int]:
        claims = current_user()
        if claims is None:
            raise TokenRequiredError()
        user = self._users.find_by_id(claims.id, timeout=self._store_timeout)
        if user is None or user.username != claims.username:
            raise UserNotFoundError()
        payload = {
            "success": True,
            "user": {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "created_at": user.created_at.isoformat() if user.created_at else None,
            },
        }
        return jsonify(payload), 200

    @auth_optional
    def session(self) -> tuple[Response, int]:
        claims = current_user()
        payload = {
            "success": True,
            "authenticated": claims is not None,
            "user": claims.to_dict() if claims else None,
        }
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        bp.add_url_rule("/session", view_func=self.session, methods=["GET"])
        return bp
