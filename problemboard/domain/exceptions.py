# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from problemboard.shared.errors.base import ClientError


class InvariantViolationError(ClientError):
    code = "invariant_violation"

    def __init__(self, message: str, *, field: str | None = None):
        context = {"field": field} if field else None
        super().__init__(message, context=context)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


InvariantViolation = InvariantViolationError
