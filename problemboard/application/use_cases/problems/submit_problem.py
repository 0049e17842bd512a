# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from problemboard.domain.problems.entities import (
    Problem,
    ProblemDifficulty,
    ProblemDraft,
    ProblemStatus,
)
from problemboard.domain.problems.exceptions import UnknownTagError
from problemboard.domain.problems.repositories import ProblemRepository, TagRepository
from problemboard.shared.logging import logger


@dataclass(slots=True, frozen=True)
class SubmitProblemInput:
    author_id: int
    title: str
    description: str
    difficulty: ProblemDifficulty | str
    tags: Sequence[str]
    source: str | None = None


class SubmitProblemUseCase:
    def __init__(self, *, problems: ProblemRepository, tags: TagRepository) -> None:
        self._problems = problems
        self._tags = tags

    def execute(self, data: SubmitProblemInput) -> Problem:
        draft = ProblemDraft(
            author_id=data.author_id,
            title=data.title,
            description=data.description,
            source=data.source,
            difficulty=data.difficulty,
            tags=tuple(data.tags),
        )
        known = {tag.name for tag in self._tags.find_by_names(draft.tags)}
        missing = [name for name in draft.tags if name not in known]
        if missing:
            raise UnknownTagError(missing)

        problem = self._problems.add(draft, ProblemStatus.PENDING)
        logger.info(f"problems.submit: ok problem_id={problem.id} author_id={data.author_id}")
        return problem
