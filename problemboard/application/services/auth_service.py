# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Authentication and account management.

``AuthService`` is built once by the container and shared by every request;
it keeps no per-request state and takes no locks, so its methods are safe to
call concurrently.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from problemboard.domain.users.entities import (
    AuthResult,
    Identity,
    User,
    UserProfile,
    normalize_email,
    normalize_username,
)
from problemboard.domain.users.exceptions import (
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidPreferencesError,
    InvalidProfileError,
    InvalidResetTokenError,
    MissingFieldsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from problemboard.domain.users.repositories import (
    PasswordHasher,
    ResetTokenNotifier,
    SessionTokenCodec,
    UserRepository,
)
from problemboard.shared.logging import logger

from .reset_tokens import ResetTokenManager

NAME_MAX_LENGTH = 128


class AuthService:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        session_tokens: SessionTokenCodec,
        reset_tokens: ResetTokenManager,
        notifier: ResetTokenNotifier,
        preferences_max_bytes: int = 4096,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._session_tokens = session_tokens
        self._reset_tokens = reset_tokens
        self._notifier = notifier
        self._preferences_max_bytes = preferences_max_bytes
        self._dummy_hash: str | None = None

    # Registration and login

    def signup(self, name: str, email: str, username: str, password: str) -> AuthResult:
        name = (name or "").strip()
        email = normalize_email(email)
        username = normalize_username(username)
        if not (name and email and username and password):
            raise MissingFieldsError()
        if len(name) > NAME_MAX_LENGTH:
            raise InvalidProfileError()

        if self._users.find_by_email_or_username(email, username) is not None:
            logger.info("auth.signup: rejected, email or username in use")
            raise UserAlreadyExistsError()

        password_hash = self._password_hasher.hash(password)
        # The store's unique constraints still reject a concurrent duplicate.
        user = self._users.add(name, email, username, password_hash)
        token = self._session_tokens.issue(user.id)
        logger.info(f"auth.signup: ok user_id={user.id}")
        return AuthResult(user=user.to_profile(), token=token)

    def login(
        self,
        password: str,
        *,
        email: str | None = None,
        username: str | None = None,
    ) -> AuthResult:
        email = normalize_email(email) or None
        username = normalize_username(username) or None
        user = None
        if email or username:
            user = self._users.find_by_email_or_username(email, username)

        if user is None:
            # Unknown identities still pay for one verification.
            self._password_hasher.verify(password or "", self._get_dummy_hash())
            logger.info("auth.login: rejected")
            raise InvalidCredentialsError()
        if not self._password_hasher.verify(password or "", user.password_hash):
            logger.info(f"auth.login: rejected user_id={user.id}")
            raise InvalidCredentialsError()

        token = self._session_tokens.issue(user.id)
        logger.info(f"auth.login: ok user_id={user.id}")
        return AuthResult(user=user.to_profile(), token=token)

    def verify_and_decode_token(self, token: str | None) -> Identity | None:
        user_id = self._session_tokens.verify(token)
        if user_id is None:
            return None
        return Identity(user_id=user_id)

    # Profile

    def get_profile(self, user_id: int) -> UserProfile:
        return self._require_user(user_id).to_profile()

    def update_profile(self, user_id: int, name: str) -> UserProfile:
        if not isinstance(name, str):
            raise InvalidProfileError()
        name = name.strip()
        if not name or len(name) > NAME_MAX_LENGTH:
            raise InvalidProfileError()
        user = self._users.update_name(user_id, name)
        if user is None:
            raise UserNotFoundError()
        logger.info(f"auth.profile: updated user_id={user_id}")
        return user.to_profile()

    def update_password(
        self, user_id: int, current_password: str, new_password: str
    ) -> UserProfile:
        user = self._require_user(user_id)
        if not self._password_hasher.verify(current_password or "", user.password_hash):
            logger.info(f"auth.password: rejected user_id={user_id}")
            raise InvalidCredentialsError()
        if not new_password:
            raise InvalidPasswordError()

        updated = self._users.update_password(user_id, self._password_hasher.hash(new_password))
        if updated is None:
            raise UserNotFoundError()
        logger.info(f"auth.password: updated user_id={user_id}")
        return updated.to_profile()

    def update_preferences(self, user_id: int, preferences: Any) -> UserProfile:
        self._validate_preferences(preferences)
        user = self._users.update_preferences(user_id, dict(preferences))
        if user is None:
            raise UserNotFoundError()
        logger.info(f"auth.preferences: updated user_id={user_id}")
        return user.to_profile()

    # Password reset

    def request_password_reset(
        self, *, email: str | None = None, username: str | None = None
    ) -> None:
        email = normalize_email(email) or None
        username = normalize_username(username) or None
        if not (email or username):
            raise MissingFieldsError("email or username is required")

        user = self._users.find_by_email_or_username(email, username)
        if user is None:
            # Same outcome as a known identity; nothing is dispatched.
            logger.info("auth.reset: requested for unknown identity")
            return
        token = self._reset_tokens.create(user.id)
        self._notifier.send_reset_token(user, token)
        logger.info(f"auth.reset: requested user_id={user.id}")

    def complete_password_reset(self, reset_token: str, new_password: str) -> UserProfile:
        if not new_password:
            raise InvalidPasswordError()
        # A hashing failure must leave the token unconsumed.
        password_hash = self._password_hasher.hash(new_password)

        user_id = self._reset_tokens.consume(reset_token, password_hash=password_hash)
        if user_id is None:
            raise InvalidResetTokenError()
        user = self._users.find_by_id(user_id)
        if user is None:
            raise InvalidResetTokenError()
        logger.info(f"auth.reset: completed user_id={user_id}")
        return user.to_profile()

    def reset_password(
        self,
        *,
        email: str | None = None,
        username: str | None = None,
        reset_token: str | None = None,
        new_password: str | None = None,
    ) -> UserProfile | None:
        """Request a reset token for an identity, or complete a reset with one."""
        if reset_token:
            return self.complete_password_reset(reset_token, new_password or "")
        if email or username:
            self.request_password_reset(email=email, username=username)
            return None
        raise MissingFieldsError("either an email/username or a reset token is required")

    # Helpers

    def _require_user(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def _validate_preferences(self, preferences: Any) -> None:
        if not isinstance(preferences, Mapping):
            raise InvalidPreferencesError()
        if not all(isinstance(key, str) for key in preferences):
            raise InvalidPreferencesError("preference keys must be strings")
        try:
            encoded = json.dumps(dict(preferences), allow_nan=False)
        except (TypeError, ValueError):
            raise InvalidPreferencesError("preferences must be JSON serializable") from None
        if len(encoded.encode("utf-8")) > self._preferences_max_bytes:
            raise InvalidPreferencesError(
                f"preferences must be at most {self._preferences_max_bytes} bytes"
            )

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash("problemboard-dummy-password")
        return self._dummy_hash
