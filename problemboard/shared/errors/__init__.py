from .base import (
    AppError,
    ClientError,
    HashingError,
    ServerError,
    SigningKeyError,
    StorageError,
    TokenGenerationError,
    UnauthorizedError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ClientError",
    "HashingError",
    "ServerError",
    "SigningKeyError",
    "StorageError",
    "TokenGenerationError",
    "UnauthorizedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
