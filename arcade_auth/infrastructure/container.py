# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from arcade_auth.application.services.password_hashing import BcryptPasswordHasher
from arcade_auth.application.services.tokens import JwtTokenService
from arcade_auth.application.use_cases.users.login_user import LoginUserUseCase
from arcade_auth.application.use_cases.users.register_user import RegisterUserUseCase
from arcade_auth.application.use_cases.users.verify_token import VerifyTokenUseCase
from arcade_auth.domain.users.repositories import UserRepository
from arcade_auth.infrastructure.db import Database
from arcade_auth.infrastructure.repositories.users import SqlAlchemyUserRepository
from arcade_auth.infrastructure.resilience import BoundedExecutor
from arcade_auth.interfaces.http.controllers.auth_controller import AuthController
from arcade_auth.interfaces.http.controllers.misc_controller import MiscController
from arcade_auth.shared.config import AppConfig


class Container:
    """Wires one application's services around an explicitly passed database handle."""

    def __init__(self, config: AppConfig, database: Database) -> None:
        self.config = config
        self.database = database

    @cached_property
    def store_executor(self) -> BoundedExecutor:
        return BoundedExecutor(
            max_workers=self.config.database.pool_size + self.config.database.max_overflow
        )

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.bcrypt_rounds)

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            self.config.jwt_secret,
            lifetime=timedelta(seconds=self.config.jwt_expires_seconds),
        )

    @cached_property
    def user_repository(self) -> UserRepository:
        return SqlAlchemyUserRepository(
            self.database,
            executor=self.store_executor,
            default_timeout=self.config.database.statement_timeout,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            store_timeout=self.config.database.statement_timeout,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            store_timeout=self.config.database.statement_timeout,
        )

    @cached_property
    def verify_token_use_case(self) -> VerifyTokenUseCase:
        return VerifyTokenUseCase(tokens=self.token_service)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            users=self.user_repository,
            store_timeout=self.config.database.statement_timeout,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def close(self) -> None:
        if "store_executor" in self.__dict__:
            self.store_executor.shutdown()
        self.database.dispose()
