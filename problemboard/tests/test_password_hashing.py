from __future__ import annotations

import pytest

from problemboard.application.services import password_hashing
from problemboard.application.services.password_hashing import WerkzeugPasswordHasher
from problemboard.shared.errors import HashingError, ServerError

FAST = "pbkdf2:sha256:1000"


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=FAST)


@pytest.mark.parametrize("password", ["secret123", "pässwörd", "x" * 128, " spaced out "])
def test_hash_verifies_against_its_plaintext(hasher: WerkzeugPasswordHasher, password: str) -> None:
    digest = hasher.hash(password)

    assert password not in digest
    assert hasher.verify(password, digest) is True


def test_hash_is_salted_per_call(hasher: WerkzeugPasswordHasher) -> None:
    first = hasher.hash("secret123")
    second = hasher.hash("secret123")

    assert first != second
    assert hasher.verify("secret123", first)
    assert hasher.verify("secret123", second)


def test_wrong_password_does_not_verify(hasher: WerkzeugPasswordHasher) -> None:
    digest = hasher.hash("secret123")

    assert hasher.verify("secret124", digest) is False
    assert hasher.verify("", digest) is False


@pytest.mark.parametrize(
    "digest",
    ["", "not-a-digest", "md5$salt$abcdef", "pbkdf2:sha256:many$salt$abcdef", "$$"],
)
def test_malformed_digest_returns_false(hasher: WerkzeugPasswordHasher, digest: str) -> None:
    assert hasher.verify("secret123", digest) is False


def test_default_method_is_scrypt() -> None:
    hasher = WerkzeugPasswordHasher()
    digest = hasher.hash("secret123")

    assert digest.startswith("scrypt:")
    assert hasher.verify("secret123", digest)


def test_entropy_failure_raises_hashing_error(
    hasher: WerkzeugPasswordHasher, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken(*_args, **_kwargs):
        raise OSError("no entropy")

    monkeypatch.setattr(password_hashing, "generate_password_hash", broken)

    with pytest.raises(HashingError) as exc_info:
        hasher.hash("secret123")
    assert isinstance(exc_info.value, ServerError)


def test_unknown_method_raises_hashing_error() -> None:
    with pytest.raises(HashingError):
        WerkzeugPasswordHasher(method="rot13").hash("secret123")
