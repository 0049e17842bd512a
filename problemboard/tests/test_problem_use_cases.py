from __future__ import annotations

import pytest
from sqlalchemy import update
from sqlalchemy.orm import Session, sessionmaker

from problemboard.application.use_cases.problems import (
    GetProblemUseCase,
    ListProblemsInput,
    ListProblemsUseCase,
    ListTagsUseCase,
    SubmitProblemInput,
    SubmitProblemUseCase,
)
from problemboard.domain.exceptions import InvariantViolation
from problemboard.domain.problems.entities import ProblemStatus
from problemboard.domain.problems.exceptions import ProblemNotFoundError, UnknownTagError
from problemboard.infrastructure.db.models import Problem
from problemboard.infrastructure.repositories.problems.sqlalchemy_problem_repository import (
    SqlAlchemyProblemRepository,
    SqlAlchemyTagRepository,
)
from problemboard.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)


class Board:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self.users = SqlAlchemyUserRepository(session_factory)
        self.problems = SqlAlchemyProblemRepository(session_factory)
        self.tags = SqlAlchemyTagRepository(session_factory)
        self.tags.ensure(["arrays", "graphs", "math"])
        self.list_problems = ListProblemsUseCase(
            problems=self.problems, users=self.users, max_page_size=5
        )
        self.get_problem = GetProblemUseCase(problems=self.problems)
        self.submit_problem = SubmitProblemUseCase(problems=self.problems, tags=self.tags)
        self.list_tags = ListTagsUseCase(tags=self.tags)
        self.author = self.users.add("A", "a@x.com", "alice", "hash")
        self.reader = self.users.add("B", "b@x.com", "bob", "hash")

    def submit(self, title: str, difficulty: str, *tags: str, approve: bool = True):
        problem = self.submit_problem.execute(
            SubmitProblemInput(
                author_id=self.author.id,
                title=title,
                description="Solve it.",
                difficulty=difficulty,
                tags=tags,
            )
        )
        if approve:
            self.approve(problem.id)
        return problem

    def approve(self, problem_id: int) -> None:
        with self._session_factory() as session:
            session.execute(
                update(Problem)
                .where(Problem.id == problem_id)
                .values(status=ProblemStatus.APPROVED.value)
            )
            session.commit()


@pytest.fixture()
def board(session_factory: sessionmaker[Session]) -> Board:
    return Board(session_factory)


def test_submission_is_pending_and_normalized(board: Board) -> None:
    problem = board.submit_problem.execute(
        SubmitProblemInput(
            author_id=board.author.id,
            title="  Two Sum  ",
            description="Find two numbers.",
            difficulty="EASY",
            tags=["Arrays", "math", "arrays"],
            source="  ",
        )
    )

    assert problem.status is ProblemStatus.PENDING
    assert problem.title == "Two Sum"
    assert problem.tags == ("arrays", "math")
    assert problem.source is None


def test_submission_rejects_unknown_tags(board: Board) -> None:
    with pytest.raises(UnknownTagError) as exc_info:
        board.submit("Mystery", "easy", "arrays", "quantum")

    assert exc_info.value.context == {"tags": ["quantum"]}


@pytest.mark.parametrize(
    ("title", "description", "difficulty", "tags"),
    [
        (" ", "desc", "easy", ["arrays"]),
        ("Title", " ", "easy", ["arrays"]),
        ("Title", "desc", "impossible", ["arrays"]),
        ("Title", "desc", "easy", []),
        ("x" * 257, "desc", "easy", ["arrays"]),
    ],
)
def test_submission_invariants(
    board: Board, title: str, description: str, difficulty: str, tags: list[str]
) -> None:
    with pytest.raises(InvariantViolation):
        board.submit_problem.execute(
            SubmitProblemInput(
                author_id=board.author.id,
                title=title,
                description=description,
                difficulty=difficulty,
                tags=tags,
            )
        )


def test_pending_problem_visible_only_to_author(board: Board) -> None:
    problem = board.submit("Draft", "easy", "arrays", approve=False)

    assert board.get_problem.execute(problem.id, board.author.id).id == problem.id
    with pytest.raises(ProblemNotFoundError):
        board.get_problem.execute(problem.id, board.reader.id)
    with pytest.raises(ProblemNotFoundError):
        board.get_problem.execute(problem.id)


def test_approved_problem_is_public(board: Board) -> None:
    problem = board.submit("Public", "easy", "arrays")

    found = board.get_problem.execute(problem.id)

    assert found.status is ProblemStatus.APPROVED
    assert found.to_dict()["is_author"] is False
    assert found.to_dict(board.author.id)["is_author"] is True


def test_listing_caps_page_size(board: Board) -> None:
    for index in range(7):
        board.submit(f"P{index}", "easy", "arrays")

    page = board.list_problems.execute(ListProblemsInput(limit=50))

    assert page.limit == 5
    assert len(page.items) == 5
    assert page.total == 7


def test_listing_applies_viewer_preferences(board: Board) -> None:
    board.submit("Graph", "hard", "graphs")
    board.submit("Array", "easy", "arrays")
    board.users.update_preferences(board.reader.id, {"tags": ["graphs"]})

    anonymous = board.list_problems.execute(ListProblemsInput(limit=5))
    personalized = board.list_problems.execute(
        ListProblemsInput(limit=5, viewer_id=board.reader.id)
    )
    explicit = board.list_problems.execute(
        ListProblemsInput(limit=5, tags=["arrays"], viewer_id=board.reader.id)
    )

    assert anonymous.total == 2
    assert [p.title for p in personalized.items] == ["Graph"]
    assert [p.title for p in explicit.items] == ["Array"]


def test_listing_ignores_unusable_preferences(board: Board) -> None:
    board.submit("Graph", "hard", "graphs")
    board.users.update_preferences(board.reader.id, {"difficulties": ["legendary"], "tags": 3})

    page = board.list_problems.execute(ListProblemsInput(limit=5, viewer_id=board.reader.id))

    assert page.total == 1


def test_list_tags(board: Board) -> None:
    assert [tag.name for tag in board.list_tags.execute()] == ["arrays", "graphs", "math"]
