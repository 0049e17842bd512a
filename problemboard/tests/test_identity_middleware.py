from __future__ import annotations

import pytest
from flask import Flask, g, jsonify

from problemboard.application.services.auth_service import AuthService
from problemboard.shared.middleware.error_handler import configure_error_handling
from problemboard.shared.middleware.identity import (
    IdentityMiddleware,
    current_identity,
    extract_bearer_token,
)

from conftest import FakeClock


@pytest.fixture()
def app(auth_service: AuthService) -> Flask:
    identity = IdentityMiddleware(auth_service)
    app = Flask(__name__)
    configure_error_handling(app)

    @app.get("/private")
    @identity.required
    def private():
        return jsonify({"user_id": g.user_id})

    @app.get("/public")
    @identity.optional
    def public():
        found = current_identity()
        return jsonify({"user_id": found.user_id if found else None})

    return app


@pytest.fixture()
def token(auth_service: AuthService) -> str:
    return auth_service.signup("A", "a@x.com", "alice", "pw1").token


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (None, None),
        ("", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("  BEARER   abc  ", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        ("Bearer ", None),
        ("Bearer abc def", None),
        ("abc", None),
    ],
)
def test_extract_bearer_token(header: str | None, expected: str | None) -> None:
    assert extract_bearer_token(header) == expected


def test_required_admits_valid_token(app: Flask, token: str) -> None:
    response = app.test_client().get("/private", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.get_json() == {"user_id": 1}


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer"},
        {"Authorization": "Token abc"},
        {"Authorization": "Bearer not.a.jwt"},
    ],
)
def test_required_rejects_without_valid_token(app: Flask, headers: dict[str, str]) -> None:
    response = app.test_client().get("/private", headers=headers)

    assert response.status_code == 401
    assert response.get_json()["error"] == "unauthorized"


def test_required_rejects_expired_token(app: Flask, token: str, clock: FakeClock) -> None:
    clock.advance(hours=2)

    response = app.test_client().get("/private", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_optional_attaches_identity_when_present(app: Flask, token: str) -> None:
    response = app.test_client().get("/public", headers={"Authorization": f"Bearer {token}"})

    assert response.get_json() == {"user_id": 1}


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer forged"}])
def test_optional_never_rejects(app: Flask, headers: dict[str, str]) -> None:
    response = app.test_client().get("/public", headers=headers)

    assert response.status_code == 200
    assert response.get_json() == {"user_id": None}


def test_optional_treats_expired_token_as_anonymous(
    app: Flask, token: str, clock: FakeClock
) -> None:
    clock.advance(days=1)

    response = app.test_client().get("/public", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.get_json() == {"user_id": None}
