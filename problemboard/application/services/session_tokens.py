"""Stateless signed session tokens."""

from __future__ import annotations

from datetime import timedelta

import jwt

from problemboard.domain.users.repositories import SessionTokenCodec
from problemboard.shared.errors import SigningKeyError
from problemboard.shared.logging import logger
from problemboard.utils.time import Clock, utcnow

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class JwtSessionTokenCodec(SessionTokenCodec):
    """HMAC-signed JWTs carrying the user id in ``sub``.

    Verification never touches storage: a token is valid while its signature
    checks out and the injected clock reads earlier than ``exp``. Expiry is
    compared here rather than by PyJWT so the clock stays injectable.
    """

    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta,
        algorithm: str = "HS256",
        clock: Clock = utcnow,
    ) -> None:
        if not secret:
            raise SigningKeyError(message="session signing secret is not configured")
        if ttl <= timedelta(0):
            raise SigningKeyError(message="session token ttl must be positive")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: int) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            # Fractional NumericDate: expiry is never rounded earlier than now + ttl.
            "exp": (now + self._ttl).timestamp(),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> int | None:
        if not token:
            logger.debug("session_token: rejected (missing)")
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.debug(f"session_token: rejected ({type(exc).__name__})")
            return None

        exp = payload.get("exp")
        if not isinstance(exp, int | float) or self._clock().timestamp() >= exp:
            logger.debug("session_token: rejected (expired)")
            return None

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            logger.debug("session_token: rejected (subject not an id)")
            return None
        if user_id <= 0:
            logger.debug("session_token: rejected (subject not an id)")
            return None
        return user_id
