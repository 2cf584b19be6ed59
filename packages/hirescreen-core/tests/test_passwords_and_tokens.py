"""Tests for password hashing and the JWT codec."""

from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
import pytest

from hirescreen.auth.passwords import MAX_PASSWORD_BYTES, hash_password, password_fits, verify_password
from hirescreen.auth.tokens import TokenCodec, VerificationError
from hirescreen.config import AuthConfig

SECRET = "codec-secret-0123456789abcdef0123456789"


def test_hash_and_verify_password():
    hashed = hash_password("Secret123!", rounds=4)
    assert hashed != "Secret123!"
    assert verify_password("Secret123!", hashed)
    assert not verify_password("wrong", hashed)


def test_hash_uses_requested_cost_factor():
    hashed = hash_password("Secret123!", rounds=5)
    assert hashed.startswith("$2b$05$")


def test_default_cost_factor_is_twelve():
    config = AuthConfig(access_token_secret="a", refresh_token_secret="r")
    assert config.bcrypt_rounds == 12


def test_verify_password_with_malformed_hash_is_false():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_hash_is_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)
    assert bcrypt.checkpw(b"same", hash_password("same", rounds=4).encode())


def test_password_length_limit_is_counted_in_bytes():
    assert password_fits("x" * MAX_PASSWORD_BYTES)
    assert not password_fits("x" * (MAX_PASSWORD_BYTES + 1))
    # "ä" is two bytes in utf-8
    assert not password_fits("ä" * 37)


def test_hash_rejects_password_over_limit():
    with pytest.raises(ValueError):
        hash_password("Aa1" + "x" * 80, rounds=4)


def test_verify_rejects_password_over_limit():
    hashed = hash_password("x" * MAX_PASSWORD_BYTES, rounds=4)
    assert verify_password("x" * MAX_PASSWORD_BYTES, hashed)
    # bcrypt would ignore the extra bytes and match
    assert not verify_password("x" * MAX_PASSWORD_BYTES + "tail", hashed)


def test_sign_embeds_claims_and_lifetime():
    codec = TokenCodec()
    issued = datetime.now(UTC)
    token = codec.sign({"sub": "u1", "role": "ADMIN"}, SECRET, timedelta(minutes=15), issued_at=issued)

    result = codec.verify(token, SECRET)
    assert result.ok
    assert result.claims["sub"] == "u1"
    assert result.claims["role"] == "ADMIN"
    assert result.claims["exp"] - result.claims["iat"] == 15 * 60


def test_verify_expired_token_reports_expired():
    codec = TokenCodec()
    token = codec.sign({"sub": "u1"}, SECRET, timedelta(seconds=-1))
    result = codec.verify(token, SECRET)
    assert not result.ok
    assert result.error is VerificationError.EXPIRED
    assert result.claims is None


def test_verify_wrong_secret_reports_invalid_signature():
    codec = TokenCodec()
    token = codec.sign({"sub": "u1"}, SECRET, timedelta(minutes=1))
    result = codec.verify(token, "another-secret-0123456789abcdef012345")
    assert result.error is VerificationError.INVALID_SIGNATURE


def test_verify_garbage_reports_malformed():
    result = TokenCodec().verify("not.a.token", SECRET)
    assert result.error is VerificationError.MALFORMED


def test_verify_token_without_subject_is_malformed():
    token = jwt.encode(
        {"exp": datetime.now(UTC) + timedelta(minutes=1), "iat": datetime.now(UTC)},
        SECRET,
        algorithm="HS256",
    )
    assert TokenCodec().verify(token, SECRET).error is VerificationError.MALFORMED
