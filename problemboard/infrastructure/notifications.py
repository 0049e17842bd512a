# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from problemboard.domain.users.entities import User
from problemboard.domain.users.repositories import ResetTokenNotifier
from problemboard.shared.logging import logger


class LoggingResetTokenNotifier(ResetTokenNotifier):
    """Stand-in for the mail channel: records that a token went out."""

    def send_reset_token(self, user: User, token: str) -> None:
        logger.info(f"reset_token: dispatched user={user.id}")
