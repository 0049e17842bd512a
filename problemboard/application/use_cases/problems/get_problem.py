# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from problemboard.domain.problems.entities import Problem
from problemboard.domain.problems.exceptions import ProblemNotFoundError
from problemboard.domain.problems.repositories import ProblemRepository


class GetProblemUseCase:
    def __init__(self, *, problems: ProblemRepository) -> None:
        self._problems = problems

    def execute(self, problem_id: int, viewer_id: int | None = None) -> Problem:
        problem = self._problems.find_by_id(problem_id)
        # Unapproved submissions are only visible to their author.
        if problem is None or not problem.is_visible_to(viewer_id):
            raise ProblemNotFoundError(problem_id)
        return problem
