from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from problemboard.shared.errors.validation_types import ValidationErrorType

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_.-]+$")

PASSWORD_MIN_LENGTH = 8


def _check_email(value: str) -> str:
    value = value.strip()
    if not _EMAIL_RE.match(value):
        raise PydanticCustomError(
            ValidationErrorType.EMAIL_INVALID,
            "Email address is not valid",
            {},
        )
    return value


def _check_username(value: str) -> str:
    value = value.strip()
    if not _USERNAME_RE.match(value):
        raise PydanticCustomError(
            ValidationErrorType.USERNAME_INVALID_CHARS,
            "Username may contain only letters, digits, '_', '.' and '-'",
            {"pattern": _USERNAME_RE.pattern},
        )
    return value


def _check_new_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_TOO_SHORT,
            "Password must be at least {min_length} characters long",
            {"min_length": PASSWORD_MIN_LENGTH},
        )
    return value


class SignupRequestDTO(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=320)
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError(ValidationErrorType.BLANK, "Name cannot be blank", {})
        return value.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_new_password(value)


class LoginRequestDTO(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    username: str | None = Field(default=None, max_length=64)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @model_validator(mode="after")
    def require_identity(self) -> "LoginRequestDTO":
        if not (self.email or self.username):
            raise PydanticCustomError(
                ValidationErrorType.IDENTITY_REQUIRED,
                "Either email or username is required",
                {},
            )
        return self


class UpdateProfileRequestDTO(BaseModel):
    name: str = Field(min_length=1, max_length=128)


class UpdatePasswordRequestDTO(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=1, max_length=128)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return _check_new_password(value)


class UpdatePreferencesRequestDTO(BaseModel):
    data: dict[str, Any]


class ResetPasswordRequestDTO(BaseModel):
    """Either an identity (request a token) or a token plus new password."""

    email: str | None = Field(default=None, max_length=320)
    username: str | None = Field(default=None, max_length=64)
    reset_token: str | None = Field(default=None, max_length=256)
    new_password: str | None = Field(default=None, max_length=128)

    @model_validator(mode="after")
    def check_shape(self) -> "ResetPasswordRequestDTO":
        completing = self.reset_token is not None
        requesting = bool(self.email or self.username)
        if completing == requesting:
            raise PydanticCustomError(
                ValidationErrorType.RESET_PAYLOAD_AMBIGUOUS,
                "Send either an email/username or a reset_token with new_password",
                {},
            )
        if completing:
            if not self.new_password:
                raise PydanticCustomError(
                    ValidationErrorType.MISSING,
                    "new_password is required with reset_token",
                    {},
                )
            _check_new_password(self.new_password)
        return self
