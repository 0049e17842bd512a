# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from problemboard.domain.users.entities import User as DomainUser
from problemboard.domain.users.exceptions import UserAlreadyExistsError
from problemboard.domain.users.repositories import ResetTokenRepository, UserRepository
from problemboard.infrastructure.db.models import PasswordResetToken, User
from problemboard.infrastructure.unit_of_work import unit_of_work_scope
from problemboard.utils.time import ensure_utc


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        username=row.username,
        password_hash=row.password_hash,
        preferences=dict(row.preferences or {}),
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(
        self, name: str, email: str, username: str | None, password_hash: str
    ) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = User(
                name=name,
                email=email,
                username=username,
                password_hash=password_hash,
                preferences={},
            )
            session.add(row)
            try:
                session.flush()
            except IntegrityError:
                raise UserAlreadyExistsError() from None
            session.refresh(row)
            return _to_domain(row)

    def find_by_email_or_username(
        self, email: str | None, username: str | None
    ) -> DomainUser | None:
        conditions = []
        if email:
            conditions.append(User.email == email)
        if username:
            conditions.append(User.username == username)
        if not conditions:
            return None
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                select(User).where(or_(*conditions)).order_by(User.id).limit(1)
            ).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def update_name(self, user_id: int, name: str) -> DomainUser | None:
        return self._update(user_id, name=name)

    def update_password(self, user_id: int, password_hash: str) -> DomainUser | None:
        return self._update(user_id, password_hash=password_hash)

    def update_preferences(
        self, user_id: int, preferences: Mapping[str, Any]
    ) -> DomainUser | None:
        return self._update(user_id, preferences=dict(preferences))

    def _update(self, user_id: int, **values: Any) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            session.flush()
            session.refresh(row)
            return _to_domain(row)


class SqlAlchemyResetTokenRepository(ResetTokenRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def replace_for_user(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.execute(
                delete(PasswordResetToken).where(
                    PasswordResetToken.user_id == user_id,
                    PasswordResetToken.used_at.is_(None),
                )
            )
            session.add(
                PasswordResetToken(
                    user_id=user_id, token_hash=token_hash, expires_at=expires_at
                )
            )

    def consume(
        self, token_hash: str, now: datetime, password_hash: str | None = None
    ) -> int | None:
        with unit_of_work_scope(self._session_factory) as session:
            # Check and mark in one statement: of two racing requests only one
            # can change the row.
            result = session.execute(
                update(PasswordResetToken)
                .where(
                    PasswordResetToken.token_hash == token_hash,
                    PasswordResetToken.used_at.is_(None),
                    PasswordResetToken.expires_at > now,
                )
                .values(used_at=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None
            user_id = session.scalar(
                select(PasswordResetToken.user_id).where(
                    PasswordResetToken.token_hash == token_hash
                )
            )
            if password_hash is not None:
                # Commits or rolls back together with the token mark.
                session.execute(
                    update(User)
                    .where(User.id == user_id)
                    .values(password_hash=password_hash)
                    .execution_options(synchronize_session=False)
                )
            return user_id
