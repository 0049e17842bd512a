# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from typing import TypeVar

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from problemboard.application.services.auth_service import AuthService
from problemboard.interfaces.http.dto.auth import (
    LoginRequestDTO,
    ResetPasswordRequestDTO,
    SignupRequestDTO,
    UpdatePasswordRequestDTO,
    UpdatePreferencesRequestDTO,
    UpdateProfileRequestDTO,
)
from problemboard.shared.errors import UnauthorizedError
from problemboard.shared.errors.validation import raise_validation_error
from problemboard.shared.logging import logger
from problemboard.shared.middleware.identity import IdentityMiddleware, current_identity

_DTO = TypeVar("_DTO", bound=BaseModel)


def _parse(dto_type: type[_DTO]) -> _DTO:
    try:
        return dto_type.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


def _user_id() -> int:
    identity = current_identity()
    if identity is None:
        raise UnauthorizedError()
    return identity.user_id


class UsersController:
    def __init__(self, *, auth: AuthService, identity: IdentityMiddleware) -> None:
        self._auth = auth
        self._identity = identity

    def signup(self) -> tuple[Response, int]:
        dto = _parse(SignupRequestDTO)
        result = self._auth.signup(dto.name, dto.email, dto.username, dto.password)
        logger.info(f"users.signup: ok user_id={result.user.id}")
        return jsonify({"ok": True, **result.to_dict()}), HTTPStatus.CREATED

    def login(self) -> tuple[Response, int]:
        dto = _parse(LoginRequestDTO)
        result = self._auth.login(dto.password, email=dto.email, username=dto.username)
        return jsonify({"ok": True, **result.to_dict()}), HTTPStatus.OK

    def get_profile(self) -> tuple[Response, int]:
        profile = self._auth.get_profile(_user_id())
        return jsonify({"ok": True, "user": profile.to_dict()}), HTTPStatus.OK

    def update_profile(self) -> tuple[Response, int]:
        dto = _parse(UpdateProfileRequestDTO)
        profile = self._auth.update_profile(_user_id(), dto.name)
        return jsonify({"ok": True, "user": profile.to_dict()}), HTTPStatus.OK

    def update_password(self) -> tuple[Response, int]:
        dto = _parse(UpdatePasswordRequestDTO)
        profile = self._auth.update_password(_user_id(), dto.current_password, dto.new_password)
        return jsonify({"ok": True, "user": profile.to_dict()}), HTTPStatus.OK

    def update_preferences(self) -> tuple[Response, int]:
        dto = _parse(UpdatePreferencesRequestDTO)
        profile = self._auth.update_preferences(_user_id(), dto.data)
        return jsonify({"ok": True, "user": profile.to_dict()}), HTTPStatus.OK

    def reset_password(self) -> tuple[Response, int]:
        dto = _parse(ResetPasswordRequestDTO)
        profile = self._auth.reset_password(
            email=dto.email,
            username=dto.username,
            reset_token=dto.reset_token,
            new_password=dto.new_password,
        )
        if profile is None:
            # Identical answer whether or not the identity exists.
            return jsonify({"ok": True}), HTTPStatus.ACCEPTED
        return jsonify({"ok": True, "user": profile.to_dict()}), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        required = self._identity.required
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("/signup", view_func=self.signup, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/profile", view_func=required(self.get_profile), methods=["GET"])
        bp.add_url_rule("/profile", view_func=required(self.update_profile), methods=["PUT"])
        bp.add_url_rule("/password", view_func=required(self.update_password), methods=["PUT"])
        bp.add_url_rule(
            "/preferences", view_func=required(self.update_preferences), methods=["POST"]
        )
        bp.add_url_rule("/password/reset", view_func=self.reset_password, methods=["POST"])
        return bp
