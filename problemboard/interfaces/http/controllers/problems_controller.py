# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from problemboard.application.use_cases.problems import (
    GetProblemUseCase,
    ListProblemsInput,
    ListProblemsUseCase,
    ListTagsUseCase,
    SubmitProblemInput,
    SubmitProblemUseCase,
)
from problemboard.interfaces.http.dto.problems import (
    ListProblemsQueryDTO,
    SubmitProblemRequestDTO,
)
from problemboard.shared.errors import UnauthorizedError
from problemboard.shared.errors.validation import raise_validation_error
from problemboard.shared.middleware.identity import IdentityMiddleware, current_identity


def _viewer_id() -> int | None:
    identity = current_identity()
    return identity.user_id if identity else None


class ProblemsController:
    def __init__(
        self,
        *,
        list_problems: ListProblemsUseCase,
        get_problem: GetProblemUseCase,
        submit_problem: SubmitProblemUseCase,
        list_tags: ListTagsUseCase,
        identity: IdentityMiddleware,
        default_page_size: int = 20,
    ) -> None:
        self._list_problems = list_problems
        self._get_problem = get_problem
        self._submit_problem = submit_problem
        self._list_tags = list_tags
        self._identity = identity
        self._default_page_size = default_page_size

    def list_problems(self) -> tuple[Response, int]:
        raw = {
            "limit": request.args.get("limit"),
            "offset": request.args.get("offset", 0),
            "tags": ",".join(request.args.getlist("tags")),
            "difficulty": ",".join(request.args.getlist("difficulty")),
        }
        try:
            dto = ListProblemsQueryDTO.model_validate(
                {key: value for key, value in raw.items() if value is not None}
            )
        except ValidationError as exc:
            raise_validation_error(exc)

        viewer_id = _viewer_id()
        page = self._list_problems.execute(
            ListProblemsInput(
                limit=dto.limit or self._default_page_size,
                offset=dto.offset,
                tags=dto.tags,
                difficulties=dto.difficulty,
                viewer_id=viewer_id,
            )
        )
        return jsonify({"ok": True, **page.to_dict(viewer_id)}), HTTPStatus.OK

    def get_problem(self, problem_id: int) -> tuple[Response, int]:
        viewer_id = _viewer_id()
        problem = self._get_problem.execute(problem_id, viewer_id)
        return jsonify({"ok": True, "problem": problem.to_dict(viewer_id)}), HTTPStatus.OK

    def submit_problem(self) -> tuple[Response, int]:
        try:
            dto = SubmitProblemRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        author_id = _viewer_id()
        if author_id is None:
            raise UnauthorizedError()
        problem = self._submit_problem.execute(
            SubmitProblemInput(
                author_id=author_id,
                title=dto.title,
                description=dto.description,
                source=dto.source,
                difficulty=dto.difficulty,
                tags=dto.tags,
            )
        )
        return jsonify({"ok": True, "problem": problem.to_dict(author_id)}), HTTPStatus.CREATED

    def list_tags(self) -> tuple[Response, int]:
        tags = self._list_tags.execute()
        return jsonify({"ok": True, "tags": [tag.to_dict() for tag in tags]}), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("problems", __name__, url_prefix="/api/problems")
        bp.add_url_rule(
            "", view_func=self._identity.optional(self.list_problems), methods=["GET"],
            strict_slashes=False,
        )
        bp.add_url_rule(
            "", view_func=self._identity.required(self.submit_problem), methods=["POST"],
            strict_slashes=False,
        )
        bp.add_url_rule("/tags", view_func=self.list_tags, methods=["GET"])
        bp.add_url_rule(
            "/<int:problem_id>",
            view_func=self._identity.optional(self.get_problem),
            methods=["GET"],
        )
        return bp
