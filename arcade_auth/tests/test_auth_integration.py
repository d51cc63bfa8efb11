from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

from conftest import TEST_SECRET, make_config
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy import text

from arcade_auth.app import create_app
from arcade_auth.application.services.tokens import JwtTokenService
from arcade_auth.domain.users.entities import TokenClaims
from arcade_auth.infrastructure.db import Database
from arcade_auth.interfaces.http.auth_gate import EXTENSION_KEY
from arcade_auth.interfaces.http.controllers.misc_controller import MiscController
from arcade_auth.shared.config import DatabaseConfig

ALICE = {"username": "alice", "password": "secret1"}


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_login_flow(client: FlaskClient) -> None:
    register = client.post("/api/auth/register", json=ALICE)
    assert register.status_code == 201
    registered = register.get_json()
    assert registered["user"] == {"id": 1, "username": "alice"}
    assert registered["token"]

    login = client.post("/api/auth/login", json=ALICE)
    assert login.status_code == 200
    assert login.get_json()["user"] == {"id": 1, "username": "alice"}

    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrongpw"})
    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "secret1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json()
    assert wrong.get_json()["message"] == "invalid credentials"

    short = client.post("/api/auth/register", json={"username": "bob", "password": "12345"})
    assert short.status_code == 400
    assert short.get_json()["message"] == "password too short"

    duplicate = client.post("/api/auth/register", json=ALICE)
    assert duplicate.status_code == 409
    assert duplicate.get_json()["message"] == "username exists"


def test_password_is_stored_hashed(app: Flask, client: FlaskClient) -> None:
    client.post("/api/auth/register", json=ALICE)

    database = app.extensions[EXTENSION_KEY].database
    with database.engine.connect() as conn:
        stored = conn.execute(text("SELECT password_hash FROM users")).scalar_one()
    assert stored != "secret1"
    assert stored.startswith("$2b$04$")


def test_missing_fields_and_invalid_username(client: FlaskClient) -> None:
    missing = client.post("/api/auth/register", json={"username": "alice"})
    spaced = client.post("/api/auth/register", json={"username": "al ice", "password": "secret1"})

    assert missing.status_code == 400
    assert missing.get_json()["message"] == "missing fields"
    assert spaced.status_code == 400
    assert spaced.get_json()["message"] == "invalid username"


def test_protected_route_gate(client: FlaskClient) -> None:
    token = client.post("/api/auth/register", json=ALICE).get_json()["token"]

    no_token = client.get("/api/auth/me")
    assert no_token.status_code == 401
    assert no_token.get_json()["message"] == "token required"

    bad_token = client.get("/api/auth/me", headers=_bearer("garbage"))
    assert bad_token.status_code == 403
    assert bad_token.get_json()["message"] == "invalid or expired token"

    me = client.get("/api/auth/me", headers=_bearer(token))
    assert me.status_code == 200
    user = me.get_json()["user"]
    assert user["id"] == 1
    assert user["username"] == "alice"
    assert user["created_at"]


def test_expired_token_is_forbidden(client: FlaskClient) -> None:
    client.post("/api/auth/register", json=ALICE)
    stale = JwtTokenService(
        TEST_SECRET, clock=lambda: datetime.now(UTC) - timedelta(hours=25)
    ).issue(TokenClaims(id=1, username="alice"))

    response = client.get("/api/auth/me", headers=_bearer(stale))

    assert response.status_code == 403
    assert response.get_json()["message"] == "invalid or expired token"


def test_token_for_missing_user_is_not_found(client: FlaskClient) -> None:
    ghost = JwtTokenService(TEST_SECRET).issue(TokenClaims(id=99, username="ghost"))

    response = client.get("/api/auth/me", headers=_bearer(ghost))

    assert response.status_code == 404


def test_optional_session_route(client: FlaskClient) -> None:
    token = client.post("/api/auth/register", json=ALICE).get_json()["token"]

    anonymous = client.get("/api/auth/session")
    invalid = client.get("/api/auth/session", headers=_bearer("garbage"))
    signed_in = client.get("/api/auth/session", headers=_bearer(token))

    assert anonymous.status_code == invalid.status_code == signed_in.status_code == 200
    assert anonymous.get_json()["authenticated"] is False
    assert invalid.get_json()["user"] is None
    assert signed_in.get_json()["user"] == {"id": 1, "username": "alice"}


def test_health_and_unknown_route(client: FlaskClient) -> None:
    health = client.get("/api/health")
    assert health.status_code == 200
    assert health.get_json()["database"] == "ok"
    assert health.get_json()["message"] == "Auth server is running"

    missing = client.get("/api/nope")
    assert missing.status_code == 404
    assert missing.get_json() == {
        "success": False,
        "error": "not_found",
        "message": "Route not found",
    }


def test_responses_carry_security_and_request_id_headers(client: FlaskClient) -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_oversized_body_is_rejected(tmp_path: Path) -> None:
    app = create_app(make_config(tmp_path, max_content_length=64))
    try:
        response = app.test_client().post(
            "/api/auth/register",
            json={"username": "alice", "password": "x" * 200},
        )
    finally:
        app.extensions[EXTENSION_KEY].close()

    assert response.status_code == 413


def test_users_survive_restart(tmp_path: Path) -> None:
    config = make_config(tmp_path)
    first = create_app(config)
    first.test_client().post("/api/auth/register", json=ALICE)
    first.extensions[EXTENSION_KEY].close()

    second = create_app(config)
    try:
        login = second.test_client().post("/api/auth/login", json=ALICE)
    finally:
        second.extensions[EXTENSION_KEY].close()

    assert login.status_code == 200
    assert login.get_json()["user"]["id"] == 1


def test_health_reports_missing_schema(tmp_path: Path) -> None:
    database = Database(DatabaseConfig(url=f"sqlite:///{tmp_path / 'empty.db'}"))
    app = Flask(__name__)
    app.register_blueprint(MiscController(database=database).as_blueprint())
    try:
        response = app.test_client().get("/api/health")
    finally:
        database.dispose()

    assert response.status_code == 503
    assert response.get_json()["database"] == "schema_missing"
