from __future__ import annotations

import pytest

from problemboard.application.services.auth_service import AuthService
from problemboard.domain.users.entities import Identity
from problemboard.domain.users.exceptions import (
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidPreferencesError,
    InvalidProfileError,
    InvalidResetTokenError,
    MissingFieldsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from problemboard.shared.errors import StorageError

from conftest import FakeClock, InMemoryUserRepository, RecordingNotifier


def _signup(auth_service: AuthService):
    return auth_service.signup("A", "a@x.com", "alice", "pw1")


def test_signup_returns_profile_and_working_token(auth_service: AuthService) -> None:
    result = _signup(auth_service)

    assert result.user.email == "a@x.com"
    assert result.user.username == "alice"
    assert result.user.preferences == {}
    assert "password_hash" not in result.user.to_dict()
    assert auth_service.verify_and_decode_token(result.token) == Identity(result.user.id)


def test_signup_normalizes_identity(auth_service: AuthService) -> None:
    result = auth_service.signup("  Alice  ", " A@X.com ", "Alice", "pw1")

    assert result.user.name == "Alice"
    assert result.user.email == "a@x.com"
    assert result.user.username == "alice"


@pytest.mark.parametrize(
    ("email", "username"),
    [("a@x.com", "other"), ("b@x.com", "alice"), ("A@X.COM", "ALICE")],
)
def test_signup_rejects_taken_email_or_username(
    auth_service: AuthService, email: str, username: str
) -> None:
    _signup(auth_service)

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        auth_service.signup("B", email, username, "pw2")
    assert exc_info.value.status == 409


@pytest.mark.parametrize(
    "fields",
    [("", "a@x.com", "alice", "pw1"), ("A", "", "alice", "pw1"), ("A", "a@x.com", " ", "pw1"), ("A", "a@x.com", "alice", "")],
)
def test_signup_requires_all_fields(auth_service: AuthService, fields: tuple[str, ...]) -> None:
    with pytest.raises(MissingFieldsError):
        auth_service.signup(*fields)


def test_login_by_email_or_username(auth_service: AuthService) -> None:
    user_id = _signup(auth_service).user.id

    by_email = auth_service.login("pw1", email="a@x.com")
    by_username = auth_service.login("pw1", username="ALICE")

    assert by_email.user.id == user_id
    assert auth_service.verify_and_decode_token(by_username.token).user_id == user_id


def test_login_failures_are_indistinguishable(auth_service: AuthService) -> None:
    _signup(auth_service)

    with pytest.raises(InvalidCredentialsError) as unknown:
        auth_service.login("pw1", email="ghost@x.com")
    with pytest.raises(InvalidCredentialsError) as wrong:
        auth_service.login("nope", email="a@x.com")
    with pytest.raises(InvalidCredentialsError) as anonymous:
        auth_service.login("pw1")

    assert unknown.value.to_dict() == wrong.value.to_dict() == anonymous.value.to_dict()
    assert wrong.value.status == 401


def test_verify_rejects_garbage(auth_service: AuthService) -> None:
    assert auth_service.verify_and_decode_token(None) is None
    assert auth_service.verify_and_decode_token("not-a-token") is None


def test_session_expires(auth_service: AuthService, clock: FakeClock) -> None:
    token = _signup(auth_service).token

    clock.advance(hours=1)

    assert auth_service.verify_and_decode_token(token) is None


def test_get_profile(auth_service: AuthService) -> None:
    user_id = _signup(auth_service).user.id

    assert auth_service.get_profile(user_id).email == "a@x.com"
    with pytest.raises(UserNotFoundError):
        auth_service.get_profile(999)


def test_update_profile_changes_name_only(auth_service: AuthService) -> None:
    before = _signup(auth_service).user

    after = auth_service.update_profile(before.id, "  Alice Cooper ")

    assert after.name == "Alice Cooper"
    assert after.email == before.email
    assert after.username == before.username


@pytest.mark.parametrize("name", ["", "   ", "x" * 129, None])
def test_update_profile_rejects_bad_names(auth_service: AuthService, name) -> None:
    user_id = _signup(auth_service).user.id

    with pytest.raises(InvalidProfileError):
        auth_service.update_profile(user_id, name)


def test_update_profile_for_missing_user(auth_service: AuthService) -> None:
    with pytest.raises(UserNotFoundError):
        auth_service.update_profile(999, "Ghost")


def test_update_password_with_correct_current(auth_service: AuthService) -> None:
    user_id = _signup(auth_service).user.id

    auth_service.update_password(user_id, "pw1", "pw2-longer")

    assert auth_service.login("pw2-longer", email="a@x.com").user.id == user_id
    with pytest.raises(InvalidCredentialsError):
        auth_service.login("pw1", email="a@x.com")


def test_update_password_with_wrong_current_keeps_hash(
    auth_service: AuthService, users: InMemoryUserRepository
) -> None:
    user_id = _signup(auth_service).user.id
    before = users.find_by_id(user_id).password_hash

    with pytest.raises(InvalidCredentialsError):
        auth_service.update_password(user_id, "wrong", "pw2-longer")

    assert users.find_by_id(user_id).password_hash == before


def test_update_password_rejects_empty_new(auth_service: AuthService) -> None:
    user_id = _signup(auth_service).user.id

    with pytest.raises(InvalidPasswordError):
        auth_service.update_password(user_id, "pw1", "")


def test_update_preferences_replaces_document(auth_service: AuthService) -> None:
    user_id = _signup(auth_service).user.id

    auth_service.update_preferences(user_id, {"theme": "dark", "tags": ["graphs"]})
    profile = auth_service.update_preferences(user_id, {"difficulties": ["hard"]})

    assert profile.preferences == {"difficulties": ["hard"]}
    assert auth_service.get_profile(user_id).preferences == {"difficulties": ["hard"]}


@pytest.mark.parametrize(
    "preferences",
    [
        ["not", "an", "object"],
        "dark",
        {1: "numeric key"},
        {"bad": object()},
        {"nan": float("nan")},
        {"blob": "x" * 300},
    ],
)
def test_update_preferences_rejects_invalid_documents(
    auth_service: AuthService, preferences
) -> None:
    user_id = _signup(auth_service).user.id

    with pytest.raises(InvalidPreferencesError):
        auth_service.update_preferences(user_id, preferences)
    assert auth_service.get_profile(user_id).preferences == {}


def test_password_reset_round_trip(
    auth_service: AuthService, notifier: RecordingNotifier
) -> None:
    user_id = _signup(auth_service).user.id

    assert auth_service.reset_password(email="a@x.com") is None
    assert notifier.sent[0][0] == user_id

    profile = auth_service.reset_password(
        reset_token=notifier.last_token, new_password="brand-new-pw"
    )

    assert profile.id == user_id
    assert auth_service.login("brand-new-pw", username="alice").user.id == user_id


def test_reset_token_cannot_be_reused(
    auth_service: AuthService, notifier: RecordingNotifier
) -> None:
    _signup(auth_service)
    auth_service.request_password_reset(username="alice")
    token = notifier.last_token
    auth_service.complete_password_reset(token, "brand-new-pw")

    with pytest.raises(InvalidResetTokenError):
        auth_service.complete_password_reset(token, "another-pw")
    assert auth_service.login("brand-new-pw", username="alice")


def test_reset_token_expires(
    auth_service: AuthService, notifier: RecordingNotifier, clock: FakeClock
) -> None:
    _signup(auth_service)
    auth_service.request_password_reset(email="a@x.com")

    clock.advance(minutes=31)

    with pytest.raises(InvalidResetTokenError):
        auth_service.complete_password_reset(notifier.last_token, "brand-new-pw")
    assert auth_service.login("pw1", email="a@x.com")


def test_reset_request_for_unknown_identity_is_silent(
    auth_service: AuthService, notifier: RecordingNotifier
) -> None:
    assert auth_service.reset_password(email="ghost@x.com") is None
    assert notifier.sent == []


def test_reset_requires_identity_or_token(auth_service: AuthService) -> None:
    with pytest.raises(MissingFieldsError):
        auth_service.reset_password()


def test_reset_with_empty_password_keeps_token_usable(
    auth_service: AuthService, notifier: RecordingNotifier
) -> None:
    _signup(auth_service)
    auth_service.request_password_reset(email="a@x.com")

    with pytest.raises(InvalidPasswordError):
        auth_service.complete_password_reset(notifier.last_token, "")

    assert auth_service.complete_password_reset(notifier.last_token, "brand-new-pw")


def test_reset_does_not_invalidate_existing_sessions(
    auth_service: AuthService, notifier: RecordingNotifier
) -> None:
    token = _signup(auth_service).token
    auth_service.request_password_reset(email="a@x.com")
    auth_service.complete_password_reset(notifier.last_token, "brand-new-pw")

    assert auth_service.verify_and_decode_token(token) is not None


def test_failed_password_write_leaves_reset_token_usable(
    auth_service: AuthService,
    notifier: RecordingNotifier,
    users: InMemoryUserRepository,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _signup(auth_service)
    auth_service.request_password_reset(email="a@x.com")
    token = notifier.last_token

    with monkeypatch.context() as patched:
        def broken(*_args, **_kwargs):
            raise StorageError()

        patched.setattr(users, "update_password", broken)
        with pytest.raises(StorageError):
            auth_service.complete_password_reset(token, "brand-new-pw")

    assert auth_service.complete_password_reset(token, "brand-new-pw")
    assert auth_service.login("brand-new-pw", email="a@x.com")
