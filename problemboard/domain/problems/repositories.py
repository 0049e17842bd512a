# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from .entities import Problem, ProblemDraft, ProblemQuery, ProblemStatus, Tag


class ProblemRepository(Protocol):
    def list_approved(self, query: ProblemQuery) -> tuple[Sequence[Problem], int]: ...
    def find_by_id(self, problem_id: int) -> Problem | None: ...
    def add(self, draft: ProblemDraft, status: ProblemStatus = ProblemStatus.PENDING) -> Problem: ...


class TagRepository(Protocol):
    def list_all(self) -> Sequence[Tag]: ...
    def find_by_names(self, names: Iterable[str]) -> Sequence[Tag]: ...
    def ensure(self, names: Iterable[str]) -> Sequence[Tag]: ...
