# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from problemboard.domain.exceptions import InvariantViolation
from problemboard.domain.problems.entities import ProblemDifficulty, ProblemPage, ProblemQuery
from problemboard.domain.problems.repositories import ProblemRepository
from problemboard.domain.users.repositories import UserRepository
from problemboard.shared.logging import logger


@dataclass(slots=True, frozen=True)
class ListProblemsInput:
    limit: int
    offset: int = 0
    tags: Sequence[str] = ()
    difficulties: Sequence[ProblemDifficulty | str] = ()
    viewer_id: int | None = None


class ListProblemsUseCase:
    """Approved problems, newest first.

    Authenticated viewers who pass no filters get their saved ``tags`` and
    ``difficulties`` preferences applied instead.
    """

    def __init__(
        self,
        *,
        problems: ProblemRepository,
        users: UserRepository,
        max_page_size: int = 100,
    ) -> None:
        self._problems = problems
        self._users = users
        self._max_page_size = max_page_size

    def execute(self, data: ListProblemsInput) -> ProblemPage:
        query = ProblemQuery(
            limit=min(data.limit, self._max_page_size),
            offset=data.offset,
            tags=tuple(data.tags),
            difficulties=tuple(data.difficulties),
        )
        if data.viewer_id is not None and not query.is_filtered:
            query = self._personalize(query, data.viewer_id)

        items, total = self._problems.list_approved(query)
        logger.debug(
            f"problems.list: total={total} returned={len(items)} "
            f"tags={list(query.tags)} difficulties={[d.value for d in query.difficulties]}"
        )
        return ProblemPage(items=items, total=total, limit=query.limit, offset=query.offset)

    def _personalize(self, query: ProblemQuery, viewer_id: int) -> ProblemQuery:
        user = self._users.find_by_id(viewer_id)
        if user is None:
            return query
        tags = _string_list(user.preferences, "tags")
        difficulties = _string_list(user.preferences, "difficulties")
        if not (tags or difficulties):
            return query
        try:
            return ProblemQuery(
                limit=query.limit,
                offset=query.offset,
                tags=tuple(tags),
                difficulties=tuple(difficulties),
            )
        except InvariantViolation:
            logger.info(f"problems.list: ignoring unusable preferences user_id={viewer_id}")
            return query


def _string_list(preferences: Mapping[str, Any], key: str) -> list[str]:
    value = preferences.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
