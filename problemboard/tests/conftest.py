from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from sqlalchemy.orm import Session, sessionmaker

from problemboard.application.services.auth_service import AuthService
from problemboard.application.services.reset_tokens import ResetTokenManager
from problemboard.application.services.session_tokens import JwtSessionTokenCodec
from problemboard.domain.users.entities import User
from problemboard.domain.users.exceptions import UserAlreadyExistsError
from problemboard.domain.users.repositories import (
    PasswordHasher,
    ResetTokenNotifier,
    ResetTokenRepository,
    UserRepository,
)
from problemboard.infrastructure.db import build_engine, build_session_factory, init_db
from problemboard.shared.config import AppConfig, AuthConfig, DatabaseConfig

SECRET = "test-secret-key-with-enough-entropy-0123456789"
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


class InMemoryUserRepository(UserRepository):
    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self._users: dict[int, User] = {}
        self._seq = 1

    def add(self, name: str, email: str, username: str | None, password_hash: str) -> User:
        if self.find_by_email_or_username(email, username) is not None:
            raise UserAlreadyExistsError()
        now = self._clock()
        user = User(
            id=self._seq,
            name=name,
            email=email,
            username=username,
            password_hash=password_hash,
            preferences={},
            created_at=now,
            updated_at=now,
        )
        self._seq += 1
        self._users[user.id] = user
        return user

    def find_by_email_or_username(self, email: str | None, username: str | None) -> User | None:
        for user in self._users.values():
            if (email and user.email == email) or (username and user.username == username):
                return user
        return None

    def find_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def update_name(self, user_id: int, name: str) -> User | None:
        return self._update(user_id, name=name)

    def update_password(self, user_id: int, password_hash: str) -> User | None:
        return self._update(user_id, password_hash=password_hash)

    def update_preferences(self, user_id: int, preferences: Mapping[str, Any]) -> User | None:
        return self._update(user_id, preferences=dict(preferences))

    def _update(self, user_id: int, **values: Any) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        updated = replace(user, updated_at=self._clock(), **values)
        self._users[user_id] = updated
        return updated


class InMemoryResetTokenRepository(ResetTokenRepository):
    def __init__(self, users: InMemoryUserRepository | None = None) -> None:
        self.rows: dict[str, dict[str, Any]] = {}
        self._users = users
        self._lock = threading.Lock()

    def replace_for_user(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        with self._lock:
            for key in [k for k, row in self.rows.items() if row["user_id"] == user_id and row["used_at"] is None]:
                del self.rows[key]
            self.rows[token_hash] = {"user_id": user_id, "expires_at": expires_at, "used_at": None}

    def consume(
        self, token_hash: str, now: datetime, password_hash: str | None = None
    ) -> int | None:
        with self._lock:
            row = self.rows.get(token_hash)
            if row is None or row["used_at"] is not None or row["expires_at"] <= now:
                return None
            # The token is only marked once the password write went through.
            if password_hash is not None and self._users is not None:
                self._users.update_password(row["user_id"], password_hash)
            row["used_at"] = now
            return row["user_id"]


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class RecordingNotifier(ResetTokenNotifier):
    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    def send_reset_token(self, user: User, token: str) -> None:
        self.sent.append((user.id, token))

    @property
    def last_token(self) -> str:
        return self.sent[-1][1]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def users(clock: FakeClock) -> InMemoryUserRepository:
    return InMemoryUserRepository(clock)


@pytest.fixture()
def reset_repo(users: InMemoryUserRepository) -> InMemoryResetTokenRepository:
    return InMemoryResetTokenRepository(users)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def codec(clock: FakeClock) -> JwtSessionTokenCodec:
    return JwtSessionTokenCodec(secret=SECRET, ttl=timedelta(hours=1), clock=clock)


@pytest.fixture()
def auth_service(
    users: InMemoryUserRepository,
    reset_repo: InMemoryResetTokenRepository,
    notifier: RecordingNotifier,
    codec: JwtSessionTokenCodec,
    clock: FakeClock,
) -> AuthService:
    return AuthService(
        users=users,
        password_hasher=DeterministicHasher(),
        session_tokens=codec,
        reset_tokens=ResetTokenManager(tokens=reset_repo, ttl=timedelta(minutes=30), clock=clock),
        notifier=notifier,
        preferences_max_bytes=256,
    )


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker[Session]]:
    engine = build_engine(DatabaseConfig(url="sqlite://"))
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


def make_config(**overrides: Any) -> AppConfig:
    values: dict[str, Any] = {
        "secret_key": SECRET,
        "database": DatabaseConfig(url="sqlite://"),
        "auth": AuthConfig(password_hash_method=FAST_HASH_METHOD),
    }
    values.update(overrides)
    return AppConfig(**values)
