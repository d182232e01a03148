# tests/test_auth_utils.py
# Unit tests for password hashing and token handling

from datetime import timedelta

import pytest
from bson import ObjectId

from useraccounts.exceptions import InvalidTokenError
from useraccounts.utils.auth import PasswordHasher, TokenIssuer, user_claims


def test_hash_is_salted_and_verifiable():
    """Hashes differ per call, never equal the plaintext, and verify."""
    hasher = PasswordHasher(rounds=4)
    first = hasher.hash("secret1")
    second = hasher.hash("secret1")
    assert first != "secret1"
    assert first != second
    assert hasher.verify("secret1", first) is True
    assert hasher.verify("wrong-password", first) is False


def test_default_cost_factor_is_ten():
    """Production hashes use cost factor 10."""
    assert PasswordHasher().hash("secret1").startswith("$2b$10$")


def test_verify_never_raises_on_bad_hash():
    """Empty or malformed stored hashes simply fail verification."""
    hasher = PasswordHasher(rounds=4)
    assert hasher.verify("secret1", None) is False
    assert hasher.verify("secret1", "") is False
    assert hasher.verify("secret1", "not-a-hash") is False
    assert hasher.verify("", hasher.hash("secret1")) is False


def test_token_round_trip():
    """Issued tokens carry identity claims and an expiry."""
    issuer = TokenIssuer("test-secret")
    user = {"_id": ObjectId(), "email": "a@x.com", "mobile_number": "555"}
    claims = issuer.verify(issuer.issue(user_claims(user)))
    assert claims["user_id"] == str(user["_id"])
    assert claims["email"] == "a@x.com"
    assert claims["mobile_number"] == "555"
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_token_signed_with_other_secret_is_rejected():
    """Tokens from another secret fail with InvalidTokenError."""
    token = TokenIssuer("other-secret").issue({"email": "a@x.com", "mobile_number": "555"})
    with pytest.raises(InvalidTokenError):
        TokenIssuer("test-secret").verify(token)


def test_expired_token_is_rejected():
    """Expiry is the only invalidation mechanism."""
    issuer = TokenIssuer("test-secret")
    issuer.expires_in = timedelta(seconds=-10)
    token = issuer.issue({"email": "a@x.com", "mobile_number": "555"})
    with pytest.raises(InvalidTokenError):
        issuer.verify(token)


def test_garbage_token_is_rejected():
    """Malformed tokens are rejected."""
    with pytest.raises(InvalidTokenError) as excinfo:
        TokenIssuer("test-secret").verify("not.a.token")
    assert excinfo.value.status_code == 401
