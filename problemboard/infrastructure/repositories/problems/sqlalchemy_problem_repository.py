# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from problemboard.domain.problems.entities import Problem as DomainProblem
from problemboard.domain.problems.entities import (
    ProblemDifficulty,
    ProblemDraft,
    ProblemQuery,
    ProblemStatus,
)
from problemboard.domain.problems.entities import Tag as DomainTag
from problemboard.domain.problems.entities import normalize_tag
from problemboard.domain.problems.repositories import ProblemRepository, TagRepository
from problemboard.infrastructure.db.models import Comment, Problem, Tag
from problemboard.infrastructure.unit_of_work import unit_of_work_scope
from problemboard.utils.time import ensure_utc


def _to_domain(row: Problem, total_comments: int) -> DomainProblem:
    return DomainProblem(
        id=row.id,
        title=row.title,
        description=row.description,
        source=row.source,
        difficulty=ProblemDifficulty(row.difficulty),
        status=ProblemStatus(row.status),
        author_id=row.author_id,
        tags=tuple(tag.name for tag in row.tags),
        total_comments=int(total_comments),
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


def _comment_counts(session: Session, problem_ids: Sequence[int]) -> dict[int, int]:
    if not problem_ids:
        return {}
    rows = session.execute(
        select(Comment.problem_id, func.count(Comment.id))
        .where(Comment.problem_id.in_(problem_ids))
        .group_by(Comment.problem_id)
    ).all()
    return {problem_id: count for problem_id, count in rows}


class SqlAlchemyProblemRepository(ProblemRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_approved(self, query: ProblemQuery) -> tuple[Sequence[DomainProblem], int]:
        stmt = select(Problem).where(Problem.status == ProblemStatus.APPROVED.value)
        if query.tags:
            stmt = stmt.where(Problem.tags.any(Tag.name.in_(query.tags)))
        if query.difficulties:
            stmt = stmt.where(Problem.difficulty.in_([d.value for d in query.difficulties]))

        with unit_of_work_scope(self._session_factory) as session:
            total = session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
            rows = session.scalars(
                stmt.options(selectinload(Problem.tags))
                .order_by(Problem.created_at.desc(), Problem.id.desc())
                .limit(query.limit)
                .offset(query.offset)
            ).all()
            counts = _comment_counts(session, [row.id for row in rows])
            items = [_to_domain(row, counts.get(row.id, 0)) for row in rows]
        return items, int(total)

    def find_by_id(self, problem_id: int) -> DomainProblem | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                select(Problem)
                .options(selectinload(Problem.tags))
                .where(Problem.id == problem_id)
            ).first()
            if row is None:
                return None
            counts = _comment_counts(session, [row.id])
            return _to_domain(row, counts.get(row.id, 0))

    def add(
        self, draft: ProblemDraft, status: ProblemStatus = ProblemStatus.PENDING
    ) -> DomainProblem:
        with unit_of_work_scope(self._session_factory) as session:
            tags = session.scalars(select(Tag).where(Tag.name.in_(draft.tags))).all()
            row = Problem(
                title=draft.title,
                description=draft.description,
                source=draft.source,
                difficulty=draft.difficulty.value,
                status=status.value,
                author_id=draft.author_id,
                tags=sorted(tags, key=lambda tag: tag.name),
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row, 0)


class SqlAlchemyTagRepository(TagRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_all(self) -> Sequence[DomainTag]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.scalars(select(Tag).order_by(Tag.name)).all()
            return [DomainTag(id=row.id, name=row.name) for row in rows]

    def find_by_names(self, names: Iterable[str]) -> Sequence[DomainTag]:
        wanted = sorted({normalize_tag(name) for name in names} - {""})
        if not wanted:
            return []
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.scalars(select(Tag).where(Tag.name.in_(wanted)).order_by(Tag.name)).all()
            return [DomainTag(id=row.id, name=row.name) for row in rows]

    def ensure(self, names: Iterable[str]) -> Sequence[DomainTag]:
        wanted = sorted({normalize_tag(name) for name in names} - {""})
        with unit_of_work_scope(self._session_factory) as session:
            existing = set(session.scalars(select(Tag.name).where(Tag.name.in_(wanted))).all())
            for name in wanted:
                if name not in existing:
                    session.add(Tag(name=name))
            session.flush()
            rows = session.scalars(select(Tag).where(Tag.name.in_(wanted)).order_by(Tag.name)).all()
            return [DomainTag(id=row.id, name=row.name) for row in rows]
