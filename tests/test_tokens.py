from datetime import timedelta

import jwt
import pytest

from bulkmod.tokens import InvalidTokenError, TokenIssuer, extract_bearer

SECRET = "test-secret"


@pytest.fixture
def issuer():
    return TokenIssuer(SECRET)


def test_issue_and_verify(issuer):
    token = issuer.issue(42)
    assert issuer.verify(token) == 42


def test_token_expires_in_24_hours(issuer):
    payload = jwt.decode(issuer.issue(7), SECRET, algorithms=["HS256"])
    assert payload["sub"] == "7"
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_expired_token_rejected():
    expired = TokenIssuer(SECRET, expires_in=timedelta(seconds=-10))
    token = expired.issue(42)

    with pytest.raises(InvalidTokenError):
        TokenIssuer(SECRET).verify(token)


def test_token_from_other_key_rejected(issuer):
    token = TokenIssuer("another-secret").issue(42)

    with pytest.raises(InvalidTokenError):
        issuer.verify(token)


def test_modified_signature_rejected(issuer):
    header, payload, _ = issuer.issue(42).split(".")
    _, _, foreign_signature = TokenIssuer("another-secret").issue(42).split(".")

    with pytest.raises(InvalidTokenError):
        issuer.verify(f"{header}.{payload}.{foreign_signature}")


def test_modified_payload_rejected(issuer):
    header, _, signature = issuer.issue(42).split(".")
    _, other_payload, _ = issuer.issue(43).split(".")

    with pytest.raises(InvalidTokenError):
        issuer.verify(f"{header}.{other_payload}.{signature}")


def test_malformed_token_rejected(issuer):
    with pytest.raises(InvalidTokenError) as exc_info:
        issuer.verify("not-a-token")
    assert str(exc_info.value) == "Invalid or expired token"


def test_non_integer_subject_rejected(issuer):
    token = jwt.encode({"sub": "steve"}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        issuer.verify(token)


def test_extract_bearer():
    assert extract_bearer("Bearer abc.def.ghi") == "abc.def.ghi"
    assert extract_bearer("Basic dXNlcjpwYXNz") is None
    assert extract_bearer("") is None
    assert extract_bearer(None) is None
