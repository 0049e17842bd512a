# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol

from .entities import User


class UserRepository(Protocol):
    def add(self, name: str, email: str, username: str | None, password_hash: str) -> User: ...
    def find_by_email_or_username(self, email: str | None, username: str | None) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def update_name(self, user_id: int, name: str) -> User | None: ...
    def update_password(self, user_id: int, password_hash: str) -> User | None: ...
    def update_preferences(self, user_id: int, preferences: Mapping[str, Any]) -> User | None: ...


class ResetTokenRepository(Protocol):
    def replace_for_user(self, user_id: int, token_hash: str, expires_at: datetime) -> None: ...
    def consume(
        self, token_hash: str, now: datetime, password_hash: str | None = None
    ) -> int | None:
        """Mark the token used and, when given, store ``password_hash`` for its owner.

        Both writes commit together or not at all.
        """
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class SessionTokenCodec(Protocol):
    def issue(self, user_id: int) -> str: ...
    def verify(self, token: str | None) -> int | None: ...


class ResetTokenNotifier(Protocol):
    def send_reset_token(self, user: User, token: str) -> None: ...
