# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def normalize_username(username: str | None) -> str:
    return (username or "").strip().lower()


@dataclass(slots=True, frozen=True)
class UserProfile:
    """Public projection of a user; never carries the password hash."""

    id: int
    name: str
    email: str
    username: str | None
    preferences: Mapping[str, Any]
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "username": self.username,
            "preferences": dict(self.preferences),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    email: str
    username: str | None
    password_hash: str = field(repr=False)
    preferences: Mapping[str, Any]
    created_at: datetime
    updated_at: datetime

    def to_profile(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            username=self.username,
            preferences=dict(self.preferences),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(slots=True, frozen=True)
class Identity:
    """Caller identity decoded from a verified session token."""

    user_id: int


@dataclass(slots=True, frozen=True)
class AuthResult:
    user: UserProfile
    token: str

    def to_dict(self) -> dict[str, Any]:
        return {"user": self.user.to_dict(), "token": self.token}
