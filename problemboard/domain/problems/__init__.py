# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (
    Problem,
    ProblemDifficulty,
    ProblemDraft,
    ProblemPage,
    ProblemQuery,
    ProblemStatus,
    Tag,
)
from .exceptions import ProblemNotFoundError, UnknownTagError

__all__ = [
    "Problem",
    "ProblemDifficulty",
    "ProblemDraft",
    "ProblemPage",
    "ProblemQuery",
    "ProblemStatus",
    "Tag",
    "ProblemNotFoundError",
    "UnknownTagError",
]
