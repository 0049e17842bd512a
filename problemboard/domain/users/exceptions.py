# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from problemboard.shared.errors.base import ClientError


class MissingFieldsError(ClientError):
    code = "missing_fields"
    message = "name, email, username and password are required"


class UserAlreadyExistsError(ClientError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "email or username already in use"


class InvalidCredentialsError(ClientError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "invalid credentials"


class UserNotFoundError(ClientError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "user does not exist"


class InvalidProfileError(ClientError):
    code = "invalid_profile"
    message = "name must be a non-empty string of at most 128 characters"


class InvalidPasswordError(ClientError):
    code = "invalid_password"
    message = "password must not be empty"


class InvalidPreferencesError(ClientError):
    code = "invalid_preferences"
    message = "preferences must be a JSON object"


class InvalidResetTokenError(ClientError):
    code = "invalid_reset_token"
    message = "reset token is invalid or expired"
