# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services import (
    AuthService,
    JwtSessionTokenCodec,
    ResetTokenManager,
    WerkzeugPasswordHasher,
)
from .use_cases.problems import (
    GetProblemUseCase,
    ListProblemsInput,
    ListProblemsUseCase,
    ListTagsUseCase,
    SubmitProblemInput,
    SubmitProblemUseCase,
)

__all__ = [
    "AuthService",
    "JwtSessionTokenCodec",
    "ResetTokenManager",
    "WerkzeugPasswordHasher",
    "GetProblemUseCase",
    "ListProblemsInput",
    "ListProblemsUseCase",
    "ListTagsUseCase",
    "SubmitProblemInput",
    "SubmitProblemUseCase",
]
