# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth_service import AuthService
from .password_hashing import WerkzeugPasswordHasher
from .reset_tokens import ResetTokenManager, digest_reset_token
from .session_tokens import JwtSessionTokenCodec

__all__ = [
    "AuthService",
    "JwtSessionTokenCodec",
    "ResetTokenManager",
    "WerkzeugPasswordHasher",
    "digest_reset_token",
]
