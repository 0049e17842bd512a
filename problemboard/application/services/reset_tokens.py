"""Single-use password reset tokens."""

from __future__ import annotations

import hashlib
import secrets
from datetime import timedelta

from problemboard.domain.users.repositories import ResetTokenRepository
from problemboard.shared.errors import TokenGenerationError
from problemboard.shared.logging import logger
from problemboard.utils.time import Clock, utcnow


def digest_reset_token(token: str) -> str:
    """Only the SHA-256 hex digest of a reset token is ever stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class ResetTokenManager:
    def __init__(
        self,
        *,
        tokens: ResetTokenRepository,
        ttl: timedelta,
        token_bytes: int = 32,
        clock: Clock = utcnow,
    ) -> None:
        self._tokens = tokens
        self._ttl = ttl
        self._token_bytes = token_bytes
        self._clock = clock

    def create(self, user_id: int) -> str:
        try:
            token = secrets.token_urlsafe(self._token_bytes)
        except (OSError, NotImplementedError) as exc:
            logger.error(f"reset_token: entropy source failed ({type(exc).__name__})")
            raise TokenGenerationError() from exc

        expires_at = self._clock() + self._ttl
        self._tokens.replace_for_user(user_id, digest_reset_token(token), expires_at)
        logger.info(f"reset_token: issued user={user_id} exp={expires_at.isoformat()}")
        return token

    def consume(self, token: str | None, password_hash: str | None = None) -> int | None:
        """Return the owner of ``token`` and mark it used, or ``None``.

        Unknown, expired and already used tokens are indistinguishable to the
        caller. The repository performs the check and the mark as one
        conditional update, so concurrent attempts succeed at most once. A
        given ``password_hash`` is stored in the same transaction, so a failed
        write leaves the token unused.
        """
        if not token:
            return None
        user_id = self._tokens.consume(
            digest_reset_token(token), now=self._clock(), password_hash=password_hash
        )
        if user_id is None:
            logger.info("reset_token: rejected (unknown, expired or used)")
            return None
        logger.info(f"reset_token: consumed user={user_id}")
        return user_id
