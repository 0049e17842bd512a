# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-token identity injection for Flask views.

Two policies share one resolution step:

- ``required``: no verified identity means 401 and the view never runs.
- ``optional``: the view always runs; ``current_identity()`` is ``None`` for
  anonymous callers.

Missing headers, other schemes, malformed, forged and expired tokens all
resolve to the same anonymous outcome.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, Protocol

from flask import g, request

from problemboard.domain.users.entities import Identity
from problemboard.shared.errors import UnauthorizedError
from problemboard.shared.logging import logger


class TokenVerifier(Protocol):
    def verify_and_decode_token(self, token: str | None) -> Identity | None: ...


def extract_bearer_token(header: str | None) -> str | None:
    if not header or not isinstance(header, str):
        return None
    scheme, _, credentials = header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = credentials.strip()
    if not token or " " in token:
        return None
    return token


def current_identity() -> Identity | None:
    return g.get("identity")


class IdentityMiddleware:
    def __init__(self, verifier: TokenVerifier) -> None:
        self._verifier = verifier

    def resolve(self) -> Identity | None:
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token is None:
            return None
        return self._verifier.verify_and_decode_token(token)

    def required(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            identity = self.resolve()
            if identity is None:
                logger.info(f"auth: rejected anonymous {request.method} {request.path}")
                raise UnauthorizedError()
            self._attach(identity)
            return func(*args, **kwargs)

        return wrapper

    def optional(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            identity = self.resolve()
            if identity is not None:
                self._attach(identity)
            return func(*args, **kwargs)

        return wrapper

    @staticmethod
    def _attach(identity: Identity) -> None:
        g.identity = identity
        g.user_id = identity.user_id


__all__ = [
    "IdentityMiddleware",
    "TokenVerifier",
    "current_identity",
    "extract_bearer_token",
]
