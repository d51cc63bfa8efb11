# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from typing import Annotated
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

INSECURE_JWT_SECRET = "your-secret-key-change-in-production"

# Nested groups read their own aliased variables from the environment.
_NESTED_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///data/arcade_auth.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    # Upper bound for a single store call made on behalf of a request.
    statement_timeout: float = Field(5.0, ge=0.1, alias="DATABASE_STATEMENT_TIMEOUT")

    model_config = _NESTED_CONFIG


class ResilienceConfig(BaseSettings):
    max_retries: int = Field(3, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.5, ge=0.1, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(8.0, ge=0.1, alias="RESILIENCE_BACKOFF_CAP")

    model_config = _NESTED_CONFIG


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        ["http://localhost:3000", "http://localhost:8080"], alias="ALLOWED_ORIGINS"
    )

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    global_rate_limit: int = Field(100, ge=1, alias="RL_GLOBAL_LIMIT")
    auth_rate_limit: int = Field(10, ge=1, alias="RL_AUTH_LIMIT")
    rate_limit_window: float = Field(15 * 60.0, ge=0.1, alias="RL_WINDOW")

    # Number of reverse proxies in front of the app whose X-Forwarded-For hop is trusted.
    trusted_proxies: int = Field(0, ge=0, alias="TRUSTED_PROXIES")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _NESTED_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _resilience_config_factory() -> ResilienceConfig:
    return ResilienceConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    jwt_secret: str = Field(INSECURE_JWT_SECRET, alias="JWT_SECRET")
    jwt_expires_seconds: int = Field(24 * 60 * 60, ge=1, alias="JWT_EXPIRES_SECONDS")
    bcrypt_rounds: int = Field(12, ge=4, le=31, alias="BCRYPT_ROUNDS")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, ge=1, le=65535, alias="PORT")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    max_content_length: int = Field(10 * 1024 * 1024, ge=1, alias="MAX_CONTENT_LENGTH")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    resilience: ResilienceConfig = Field(default_factory=_resilience_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        validate_by_name=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.uses_insecure_secret():
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure JWT_SECRET detected in production!\n"
                "   JWT_SECRET must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = self.security_warnings()
        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def uses_insecure_secret(self) -> bool:
        return self.jwt_secret in (INSECURE_JWT_SECRET, "dev", "development", "test", "")

    def security_warnings(self) -> list[str]:
        warnings = []
        if self.uses_insecure_secret():
            warnings.append("⚠️  JWT_SECRET uses the documented insecure default")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_rate_limit:
            warnings.append("⚠️  Rate limiting is DISABLED")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        return warnings


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "INSECURE_JWT_SECRET", "load_config"]
