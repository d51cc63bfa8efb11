from .base import (
    AppError,
    AuthError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from .http import handle_app_error, register_error_handlers

__all__ = [
    "AppError",
    "AuthError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "ValidationError",
    "handle_app_error",
    "register_error_handlers",
]
