from datetime import timedelta

import pytest
from jose import jwt

from bloomhub.core.errors import InvalidToken
from bloomhub.core.security import (
    AdminClaims,
    CustomerClaims,
    FloristClaims,
    TokenService,
    hash_password,
    verify_password,
)


def test_password_hash_is_salted_and_verifies():
    first = hash_password("Secret123")
    second = hash_password("Secret123")

    assert first != "Secret123"
    assert first != second
    assert verify_password("Secret123", first)
    assert not verify_password("secret123", first)


def test_verify_password_rejects_blank_and_garbage_hashes():
    assert not verify_password("Secret123", None)
    assert not verify_password("", hash_password("x"))
    assert not verify_password("Secret123", "not-a-hash")


def test_customer_token_round_trip(tokens):
    token = tokens.issue_customer("user-1", "shopper@example.com")

    claims = tokens.verify(token)

    assert isinstance(claims, CustomerClaims)
    assert claims.sub == "user-1"
    assert claims.email == "shopper@example.com"
    assert claims.exp - claims.iat == 24 * 3600


def test_florist_token_uses_its_own_claim_shape(tokens):
    token = tokens.issue_florist(7, "a@b.com")

    raw = jwt.get_unverified_claims(token)
    assert raw["floristId"] == 7
    assert raw["type"] == "florist"
    assert "sub" not in raw

    claims = tokens.verify(token)
    assert isinstance(claims, FloristClaims)
    assert claims.florist_id == 7


def test_admin_token_round_trip(tokens):
    claims = tokens.verify(tokens.issue_admin("temp-admin", "operator@example.com"))
    assert isinstance(claims, AdminClaims)
    assert claims.sub == "temp-admin"


@pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-30)])
def test_expired_token_is_rejected_despite_valid_signature(tokens, ttl):
    token = tokens.issue_customer("user-1", "shopper@example.com", ttl=ttl)

    with pytest.raises(InvalidToken) as exc:
        tokens.verify(token)
    assert exc.value.status_code == 401


def test_token_signed_with_other_secret_is_rejected(tokens):
    forged = TokenService("other-secret").issue_customer("user-1", "shopper@example.com")

    with pytest.raises(InvalidToken):
        tokens.verify(forged)


@pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
def test_malformed_token_is_rejected(tokens, token):
    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_token_without_kind_is_rejected(tokens):
    # Legacy shape: valid signature, no discriminant.
    token = tokens.issue({"userId": "user-1", "sub": "user-1", "email": "x@example.com"})

    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_issue_requires_subject_and_email(tokens):
    with pytest.raises(ValueError):
        tokens.issue({"kind": "customer", "sub": "user-1"})
