# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from problemboard.shared.errors.base import ClientError


class ProblemNotFoundError(ClientError):
    code = "problem_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "problem does not exist"

    def __init__(self, problem_id: int) -> None:
        super().__init__(context={"problem_id": problem_id})


class UnknownTagError(ClientError):
    code = "unknown_tag"
    message = "one or more tags do not exist"

    def __init__(self, tags: list[str]) -> None:
        super().__init__(context={"tags": tags})
