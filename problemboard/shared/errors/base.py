# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Client-fault / server-fault error hierarchy shared by every layer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str = ""
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.message:
            payload["message"] = self.message
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class ClientError(AppError):
    """Caller-correctable failure; the message is safe to return to the caller.

    Subclasses declare ``code``, ``status`` and ``message`` as class attributes
    and may be raised without arguments.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "client_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(str, getattr(self, "message", ""))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            context=context,
        )


class ServerError(AppError):
    """Unexpected internal failure; never surfaced verbatim to the caller."""

    def __init__(
        self,
        code: str | None = None,
        *,
        message: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "internal_error"))
        super().__init__(
            code=resolved_code,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            context=context,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": "internal_error"}


class ValidationError(ClientError):
    code = "validation_error"
    status = HTTPStatus.UNPROCESSABLE_ENTITY
    message = "request payload is invalid"


class UnauthorizedError(ClientError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    message = "Unauthorized!"


class StorageError(ServerError):
    code = "storage_error"


class HashingError(ServerError):
    code = "hashing_error"


class SigningKeyError(ServerError):
    code = "signing_key_error"


class TokenGenerationError(ServerError):
    code = "token_generation_error"
