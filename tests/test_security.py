from datetime import timedelta

import pytest
from jose import jwt

from app.utils import security
from app.utils.exceptions import InvalidTokenError, TokenExpiredError


def test_hash_is_salted_and_verifies():
    first = security.hash_password("Secret123!")
    second = security.hash_password("Secret123!")

    assert first != second
    assert security.verify_password("Secret123!", first)
    assert not security.verify_password("Secret124!", first)


def test_access_token_round_trip_claims():
    token = security.create_access_token("user-1", "user@example.com")
    payload = security.decode_access_token(token)

    assert payload["user_id"] == "user-1"
    assert payload["email"] == "user@example.com"
    assert payload["type"] == "access"


def test_tokens_issued_together_differ():
    assert security.create_access_token("u", "e@x.io") != security.create_access_token("u", "e@x.io")
    assert security.create_refresh_token("u") != security.create_refresh_token("u")


def test_access_and_refresh_use_separate_secrets():
    refresh = security.create_refresh_token("user-1")

    with pytest.raises(InvalidTokenError):
        security.decode_access_token(refresh)
    with pytest.raises(InvalidTokenError):
        security.decode_refresh_token(security.create_access_token("user-1", "e@x.io"))


def test_expired_access_token():
    token = security.create_access_token("user-1", "e@x.io", expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        security.decode_access_token(token)


def test_wrong_type_claim_is_rejected():
    forged = jwt.encode(
        {"user_id": "user-1", "type": "refresh"},
        security.ACCESS_TOKEN_SECRET,
        algorithm=security.ALGORITHM,
    )
    with pytest.raises(InvalidTokenError):
        security.decode_access_token(forged)


def test_tampered_token_is_rejected():
    token = security.create_access_token("user-1", "e@x.io")
    with pytest.raises(InvalidTokenError):
        security.decode_access_token(token.rsplit(".", 1)[0] + "." + "A" * 43)
