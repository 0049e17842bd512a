# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AuthResult, Identity, User, UserProfile
from .exceptions import (
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidPreferencesError,
    InvalidProfileError,
    InvalidResetTokenError,
    MissingFieldsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "AuthResult",
    "Identity",
    "User",
    "UserProfile",
    "InvalidCredentialsError",
    "InvalidPasswordError",
    "InvalidPreferencesError",
    "InvalidProfileError",
    "InvalidResetTokenError",
    "MissingFieldsError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
