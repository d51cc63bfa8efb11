from __future__ import annotations

import pytest
from conftest import DeterministicHasher, InMemoryUserRepository

from arcade_auth.application.services.tokens import JwtTokenService
from arcade_auth.application.use_cases.users.login_user import LoginUserUseCase
from arcade_auth.application.use_cases.users.register_user import RegisterUserUseCase
from arcade_auth.application.use_cases.users.verify_token import (
    VerifyTokenUseCase,
    extract_bearer,
)
from arcade_auth.domain.users.entities import TokenClaims
from arcade_auth.domain.users.exceptions import (
    InvalidCredentialsError,
    StoreTimeoutError,
    TokenRejectedError,
    TokenRequiredError,
    UserAlreadyExistsError,
)
from arcade_auth.shared.errors import ValidationError


@pytest.fixture()
def register(
    users: InMemoryUserRepository, hasher: DeterministicHasher, token_service: JwtTokenService
) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, tokens=token_service, password_hasher=hasher)


@pytest.fixture()
def login(
    users: InMemoryUserRepository, hasher: DeterministicHasher, token_service: JwtTokenService
) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, tokens=token_service, password_hasher=hasher)


@pytest.fixture()
def gate(token_service: JwtTokenService) -> VerifyTokenUseCase:
    return VerifyTokenUseCase(tokens=token_service)


def test_register_stores_hash_and_returns_token(
    register: RegisterUserUseCase,
    users: InMemoryUserRepository,
    token_service: JwtTokenService,
) -> None:
    result = register.execute("alice", "secret1")

    assert result.user == TokenClaims(id=1, username="alice")
    assert token_service.verify(result.token) == result.user
    stored = users.find_by_username("alice")
    assert stored is not None
    assert stored.password_hash == "hashed:secret1"


@pytest.mark.parametrize(
    ("username", "password", "message"),
    [
        (None, "secret1", "missing fields"),
        ("alice", None, "missing fields"),
        ("", "", "missing fields"),
        ("alice", "12345", "password too short"),
        ("al", "secret1", "invalid username"),
        ("a" * 21, "secret1", "invalid username"),
        ("al ice", "secret1", "invalid username"),
        ("alice\t", "secret1", "invalid username"),
    ],
)
def test_register_rejects_invalid_input(
    register: RegisterUserUseCase,
    users: InMemoryUserRepository,
    username: str | None,
    password: str | None,
    message: str,
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        register.execute(username, password)

    assert excinfo.value.message == message
    assert users.find_by_id(1) is None


def test_password_length_is_checked_before_username(register: RegisterUserUseCase) -> None:
    with pytest.raises(ValidationError) as excinfo:
        register.execute("x", "123")

    assert excinfo.value.message == "password too short"


@pytest.mark.parametrize("username", ["abc", "a" * 20, "player_one", "ünï"])
def test_register_accepts_boundary_usernames(register: RegisterUserUseCase, username: str) -> None:
    assert register.execute(username, "secret1").user.username == username


def test_register_rejects_existing_username(register: RegisterUserUseCase) -> None:
    register.execute("alice", "secret1")

    with pytest.raises(UserAlreadyExistsError) as excinfo:
        register.execute("alice", "another1")

    assert excinfo.value.message == "username exists"


def test_register_race_is_caught_by_store(
    hasher: DeterministicHasher, token_service: JwtTokenService
) -> None:
    class RacingRepository(InMemoryUserRepository):
        def find_by_username(self, username, *, timeout=None):
            return None

    racing = RacingRepository()
    use_case = RegisterUserUseCase(users=racing, tokens=token_service, password_hasher=hasher)
    use_case.execute("alice", "secret1")

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute("alice", "secret2")


def test_register_passes_store_timeout(
    hasher: DeterministicHasher, token_service: JwtTokenService
) -> None:
    seen: list[float | None] = []

    class RecordingRepository(InMemoryUserRepository):
        def find_by_username(self, username, *, timeout=None):
            seen.append(timeout)
            return super().find_by_username(username, timeout=timeout)

        def add(self, username, password_hash, *, timeout=None):
            seen.append(timeout)
            return super().add(username, password_hash, timeout=timeout)

    use_case = RegisterUserUseCase(
        users=RecordingRepository(),
        tokens=token_service,
        password_hasher=hasher,
        store_timeout=1.5,
    )
    use_case.execute("alice", "secret1")

    assert seen == [1.5, 1.5]


def test_store_timeout_propagates(
    hasher: DeterministicHasher, token_service: JwtTokenService
) -> None:
    class SlowRepository(InMemoryUserRepository):
        def find_by_username(self, username, *, timeout=None):
            raise StoreTimeoutError("find_by_username", timeout)

    use_case = LoginUserUseCase(
        users=SlowRepository(), tokens=token_service, password_hasher=hasher, store_timeout=0.1
    )

    with pytest.raises(StoreTimeoutError) as excinfo:
        use_case.execute("alice", "secret1")

    assert excinfo.value.retryable is True


def test_login_returns_same_identity_as_register(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    registered = register.execute("alice", "secret1")

    logged_in = login.execute("alice", "secret1")

    assert logged_in.user == registered.user
    assert logged_in.token


def test_login_errors_do_not_reveal_whether_user_exists(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("alice", "secret1")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("alice", "wrongpw")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.execute("bob", "secret1")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert wrong_password.value.message == "invalid credentials"


@pytest.mark.parametrize(("username", "password"), [(None, "x"), ("alice", ""), (None, None)])
def test_login_requires_both_fields(
    login: LoginUserUseCase, username: str | None, password: str | None
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        login.execute(username, password)

    assert excinfo.value.message == "missing fields"


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (None, None),
        ("", None),
        ("Bearer", None),
        ("Bearer   ", None),
        ("Basic abc", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
    ],
)
def test_extract_bearer(header: str | None, expected: str | None) -> None:
    assert extract_bearer(header) == expected


def test_gate_accepts_valid_token(gate: VerifyTokenUseCase, token_service: JwtTokenService) -> None:
    claims = TokenClaims(id=7, username="zoe")
    token = token_service.issue(claims)

    assert gate.execute(f"Bearer {token}") == claims
    assert gate.execute_optional(f"Bearer {token}") == claims


def test_gate_requires_token(gate: VerifyTokenUseCase) -> None:
    with pytest.raises(TokenRequiredError) as excinfo:
        gate.execute(None)

    assert excinfo.value.status == 401
    assert excinfo.value.message == "token required"


def test_gate_rejects_invalid_token(gate: VerifyTokenUseCase) -> None:
    with pytest.raises(TokenRejectedError) as excinfo:
        gate.execute("Bearer not-a-token")

    assert excinfo.value.status == 403
    assert excinfo.value.message == "invalid or expired token"


@pytest.mark.parametrize("header", [None, "Bearer not-a-token", "Token abc"])
def test_optional_gate_yields_no_identity(gate: VerifyTokenUseCase, header: str | None) -> None:
    assert gate.execute_optional(header) is None


def test_username_length_counts_characters(register: RegisterUserUseCase) -> None:
    emoji_name = "\N{VIDEO GAME}" * 20

    assert register.execute(emoji_name, "secret1").user.username == emoji_name
    with pytest.raises(ValidationError):
        register.execute("\N{VIDEO GAME}" * 21, "secret1")
