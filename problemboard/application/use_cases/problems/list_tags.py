# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from problemboard.domain.problems.entities import Tag
from problemboard.domain.problems.repositories import TagRepository


class ListTagsUseCase:
    def __init__(self, *, tags: TagRepository) -> None:
        self._tags = tags

    def execute(self) -> Sequence[Tag]:
        return self._tags.list_all()
