# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations


class ValidationErrorType:
    MISSING = "missing"
    BLANK = "blank"
    EMAIL_INVALID = "email_invalid"
    USERNAME_INVALID_CHARS = "username_invalid_chars"
    IDENTITY_REQUIRED = "identity_required"
    PASSWORD_TOO_SHORT = "password_too_short"
    PREFERENCES_NOT_OBJECT = "preferences_not_object"
    RESET_PAYLOAD_AMBIGUOUS = "reset_payload_ambiguous"
    DIFFICULTY_INVALID = "difficulty_invalid"
    TAG_INVALID = "tag_invalid"


__all__ = ["ValidationErrorType"]
