# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .get_problem import GetProblemUseCase
from .list_problems import ListProblemsInput, ListProblemsUseCase
from .list_tags import ListTagsUseCase
from .submit_problem import SubmitProblemInput, SubmitProblemUseCase

__all__ = [
    "GetProblemUseCase",
    "ListProblemsInput",
    "ListProblemsUseCase",
    "ListTagsUseCase",
    "SubmitProblemInput",
    "SubmitProblemUseCase",
]
