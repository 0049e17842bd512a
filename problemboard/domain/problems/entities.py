# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Problem board entities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from problemboard.domain.exceptions import InvariantViolation

TITLE_MAX_LENGTH = 256
TAG_MAX_LENGTH = 64


class ProblemDifficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ProblemStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def normalize_tag(name: str) -> str:
    return (name or "").strip().lower()


def parse_difficulty(value: str | ProblemDifficulty) -> ProblemDifficulty:
    try:
        return ProblemDifficulty(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(d.value for d in ProblemDifficulty)
        raise InvariantViolation(
            f"difficulty must be one of: {allowed}", field="difficulty"
        ) from None


@dataclass(slots=True, frozen=True)
class Tag:
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(slots=True, frozen=True)
class ProblemDraft:
    """A submission that has not been persisted yet."""

    author_id: int
    title: str
    description: str
    source: str | None
    difficulty: ProblemDifficulty
    tags: tuple[str, ...]

    def __post_init__(self) -> None:
        title = (self.title or "").strip()
        if not title:
            raise InvariantViolation("title must not be blank", field="title")
        if len(title) > TITLE_MAX_LENGTH:
            raise InvariantViolation(
                f"title must be at most {TITLE_MAX_LENGTH} characters", field="title"
            )
        if not (self.description or "").strip():
            raise InvariantViolation("description must not be blank", field="description")
        tags = tuple(dict.fromkeys(normalize_tag(tag) for tag in self.tags))
        if not tags or any(not tag for tag in tags):
            raise InvariantViolation("at least one non-blank tag is required", field="tags")
        source = (self.source or "").strip() or None
        object.__setattr__(self, "title", title)
        object.__setattr__(self, "tags", tags)
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "difficulty", parse_difficulty(self.difficulty))


@dataclass(slots=True, frozen=True)
class Problem:
    id: int
    title: str
    description: str
    source: str | None
    difficulty: ProblemDifficulty
    status: ProblemStatus
    author_id: int | None
    tags: tuple[str, ...]
    total_comments: int
    created_at: datetime
    updated_at: datetime

    def is_visible_to(self, viewer_id: int | None) -> bool:
        if self.status is ProblemStatus.APPROVED:
            return True
        return viewer_id is not None and viewer_id == self.author_id

    def to_dict(self, viewer_id: int | None = None) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "source": self.source,
            "difficulty": self.difficulty.value,
            "status": self.status.value,
            "tags": list(self.tags),
            "total_comments": self.total_comments,
            "is_author": viewer_id is not None and viewer_id == self.author_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class ProblemQuery:
    limit: int
    offset: int
    tags: tuple[str, ...] = ()
    difficulties: tuple[ProblemDifficulty, ...] = ()

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise InvariantViolation("limit must be positive", field="limit")
        if self.offset < 0:
            raise InvariantViolation("offset must not be negative", field="offset")
        object.__setattr__(
            self, "tags", tuple(dict.fromkeys(t for t in map(normalize_tag, self.tags) if t))
        )
        object.__setattr__(
            self, "difficulties", tuple(dict.fromkeys(map(parse_difficulty, self.difficulties)))
        )

    @property
    def is_filtered(self) -> bool:
        return bool(self.tags or self.difficulties)


@dataclass(slots=True, frozen=True)
class ProblemPage:
    items: Sequence[Problem]
    total: int
    limit: int
    offset: int

    def to_dict(self, viewer_id: int | None = None) -> dict[str, Any]:
        return {
            "items": [problem.to_dict(viewer_id) for problem in self.items],
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
        }
