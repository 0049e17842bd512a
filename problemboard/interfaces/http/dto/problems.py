from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from problemboard.domain.problems.entities import ProblemDifficulty


def _split_csv(value: object) -> object:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class ListProblemsQueryDTO(BaseModel):
    limit: int | None = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    difficulty: list[ProblemDifficulty] = Field(default_factory=list)

    @field_validator("tags", "difficulty", mode="before")
    @classmethod
    def split_lists(cls, value: object) -> object:
        return _split_csv(value)


class SubmitProblemRequestDTO(BaseModel):
    title: str = Field(min_length=1, max_length=256)
    description: str = Field(min_length=1, max_length=20000)
    source: str | None = Field(default=None, max_length=512)
    difficulty: ProblemDifficulty
    tags: list[str] = Field(min_length=1, max_length=10)
