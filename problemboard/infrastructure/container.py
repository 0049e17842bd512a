# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from problemboard.application.services.auth_service import AuthService
from problemboard.application.services.password_hashing import WerkzeugPasswordHasher
from problemboard.application.services.reset_tokens import ResetTokenManager
from problemboard.application.services.session_tokens import JwtSessionTokenCodec
from problemboard.application.use_cases.problems import (
    GetProblemUseCase,
    ListProblemsUseCase,
    ListTagsUseCase,
    SubmitProblemUseCase,
)
from problemboard.infrastructure.db import build_engine, build_session_factory, init_db
from problemboard.infrastructure.notifications import LoggingResetTokenNotifier
from problemboard.infrastructure.repositories.problems.sqlalchemy_problem_repository import (
    SqlAlchemyProblemRepository,
    SqlAlchemyTagRepository,
)
from problemboard.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyResetTokenRepository,
    SqlAlchemyUserRepository,
)
from problemboard.interfaces.http.controllers.misc_controller import MiscController
from problemboard.interfaces.http.controllers.problems_controller import ProblemsController
from problemboard.interfaces.http.controllers.users_controller import UsersController
from problemboard.shared.config import AppConfig, load_config
from problemboard.shared.logging import logger
from problemboard.shared.middleware.identity import IdentityMiddleware
from problemboard.utils.time import Clock, utcnow


class Container:
    """Builds every long-lived object once and hands out shared instances."""

    def __init__(self, config: AppConfig | None = None, *, clock: Clock = utcnow) -> None:
        self.config = config or load_config()
        self.clock = clock

    # Persistence

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    def init_storage(self) -> None:
        init_db(self.engine)
        seeded = self.tag_repository.ensure(self.config.board.default_tags)
        logger.info(f"storage: {len(seeded)} default tags ensured")

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def reset_token_repository(self) -> SqlAlchemyResetTokenRepository:
        return SqlAlchemyResetTokenRepository(self.session_factory)

    @cached_property
    def problem_repository(self) -> SqlAlchemyProblemRepository:
        return SqlAlchemyProblemRepository(self.session_factory)

    @cached_property
    def tag_repository(self) -> SqlAlchemyTagRepository:
        return SqlAlchemyTagRepository(self.session_factory)

    # Authentication core

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(method=self.config.auth.password_hash_method)

    @cached_property
    def session_token_codec(self) -> JwtSessionTokenCodec:
        return JwtSessionTokenCodec(
            secret=self.config.secret_key,
            ttl=timedelta(seconds=self.config.auth.session_ttl_seconds),
            algorithm=self.config.auth.jwt_algorithm,
            clock=self.clock,
        )

    @cached_property
    def reset_token_manager(self) -> ResetTokenManager:
        return ResetTokenManager(
            tokens=self.reset_token_repository,
            ttl=timedelta(seconds=self.config.auth.reset_token_ttl_seconds),
            token_bytes=self.config.auth.reset_token_bytes,
            clock=self.clock,
        )

    @cached_property
    def reset_token_notifier(self) -> LoggingResetTokenNotifier:
        return LoggingResetTokenNotifier()

    @cached_property
    def auth_service(self) -> AuthService:
        return AuthService(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            session_tokens=self.session_token_codec,
            reset_tokens=self.reset_token_manager,
            notifier=self.reset_token_notifier,
            preferences_max_bytes=self.config.auth.preferences_max_bytes,
        )

    @cached_property
    def identity_middleware(self) -> IdentityMiddleware:
        return IdentityMiddleware(self.auth_service)

    # Problem board

    @cached_property
    def list_problems_use_case(self) -> ListProblemsUseCase:
        return ListProblemsUseCase(
            problems=self.problem_repository,
            users=self.user_repository,
            max_page_size=self.config.board.max_page_size,
        )

    @cached_property
    def get_problem_use_case(self) -> GetProblemUseCase:
        return GetProblemUseCase(problems=self.problem_repository)

    @cached_property
    def submit_problem_use_case(self) -> SubmitProblemUseCase:
        return SubmitProblemUseCase(problems=self.problem_repository, tags=self.tag_repository)

    @cached_property
    def list_tags_use_case(self) -> ListTagsUseCase:
        return ListTagsUseCase(tags=self.tag_repository)

    # HTTP

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(auth=self.auth_service, identity=self.identity_middleware)

    @cached_property
    def problems_controller(self) -> ProblemsController:
        return ProblemsController(
            list_problems=self.list_problems_use_case,
            get_problem=self.get_problem_use_case,
            submit_problem=self.submit_problem_use_case,
            list_tags=self.list_tags_use_case,
            identity=self.identity_middleware,
            default_page_size=self.config.board.default_page_size,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(
            engine=self.engine,
            metrics_enabled=self.config.observability.metrics_enabled,
        )
