"""
tests/test_tokens.py -- Unit tests for the token codec and password hashing.

Covers:
  - issue() / verify() round trip returns the subject as an int
  - each rejection class: MalformedToken, InvalidSignature, TokenExpired
  - signature is checked before expiry
  - bcrypt hashing and the over-long / corrupt-hash paths of verify_password
"""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.tokens import (
    InvalidSignature,
    MalformedToken,
    TokenExpired,
    create_access_token,
    decode_access_token,
    dummy_hash,
    hash_password,
    issue,
    verify,
    verify_password,
)

SECRET = "s" * 32
OTHER_SECRET = "o" * 32


def _tamper(token: str) -> str:
    """Flip one bit of the decoded signature and re-encode it."""
    header, payload, signature = token.split(".")
    raw = base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4))
    flipped = bytes([raw[0] ^ 0x01]) + raw[1:]
    return ".".join([header, payload, base64.urlsafe_b64encode(flipped).rstrip(b"=").decode("ascii")])


class TestIssueVerify:
    def test_round_trip_returns_subject(self) -> None:
        token = issue(42, SECRET, 60)
        assert verify(token, SECRET) == 42

    def test_payload_carries_only_sub_iat_exp(self) -> None:
        claims = jwt.get_unverified_claims(issue(7, SECRET, 60))
        assert set(claims) == {"sub", "iat", "exp"}
        assert claims["sub"] == "7"
        assert claims["exp"] - claims["iat"] == 60

    def test_configured_helpers_round_trip(self) -> None:
        assert decode_access_token(create_access_token(5)) == 5


class TestVerifyRejections:
    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b", "a.b.c"])
    def test_garbage_is_malformed(self, token: str) -> None:
        with pytest.raises(MalformedToken):
            verify(token, SECRET)

    def test_wrong_secret_is_invalid_signature(self) -> None:
        with pytest.raises(InvalidSignature):
            verify(issue(1, OTHER_SECRET, 60), SECRET)

    def test_tampered_signature_is_invalid_signature(self) -> None:
        with pytest.raises(InvalidSignature):
            verify(_tamper(issue(1, SECRET, 60)), SECRET)

    def test_expired_token(self) -> None:
        with pytest.raises(TokenExpired):
            verify(issue(1, SECRET, -5), SECRET)

    def test_tampered_expired_token_reports_signature_first(self) -> None:
        with pytest.raises(InvalidSignature):
            verify(_tamper(issue(1, SECRET, -5)), SECRET)

    def test_missing_subject_is_malformed(self) -> None:
        exp = datetime.now(timezone.utc) + timedelta(minutes=1)
        token = jwt.encode({"exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            verify(token, SECRET)

    def test_non_numeric_subject_is_malformed(self) -> None:
        exp = datetime.now(timezone.utc) + timedelta(minutes=1)
        token = jwt.encode({"sub": "alice", "exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            verify(token, SECRET)

    def test_integer_subject_claim_is_malformed(self) -> None:
        exp = datetime.now(timezone.utc) + timedelta(minutes=1)
        token = jwt.encode({"sub": 5, "exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            verify(token, SECRET)

    def test_missing_expiry_is_malformed(self) -> None:
        token = jwt.encode({"sub": "1"}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            verify(token, SECRET)


class TestPasswords:
    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert hashed.startswith("$2")
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_each_hash_is_salted(self) -> None:
        assert hash_password("secret123") != hash_password("secret123")

    def test_corrupt_hash_does_not_match(self) -> None:
        assert verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_dummy_hash_is_cached(self) -> None:
        assert dummy_hash() is dummy_hash()
