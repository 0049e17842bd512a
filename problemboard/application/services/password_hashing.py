"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from problemboard.domain.users.repositories import PasswordHasher
from problemboard.shared.errors import HashingError
from problemboard.shared.logging import logger


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted one-way hashes via werkzeug; digests embed method and salt."""

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        try:
            return str(
                generate_password_hash(
                    password, method=self._method, salt_length=self._salt_length
                )
            )
        except (OSError, NotImplementedError, ValueError) as exc:
            # Entropy source failure or an unusable method.
            logger.error(f"password_hasher: hashing failed ({type(exc).__name__})")
            raise HashingError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            logger.debug("password_hasher: malformed digest rejected")
            return False
