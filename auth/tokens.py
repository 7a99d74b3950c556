"""
auth/tokens.py -- Token codec and password hashing.

Security design decisions:
  JWT: python-jose with HS256. A token carries only the user id (sub), the
       issue time (iat) and the expiry (exp). issue() and verify() are pure
       functions of their arguments and the clock: the secret is passed in,
       nothing is read from module state, nothing is written anywhere.

       verify() distinguishes three failures so the identity resolver can log
       and report them separately:
         MalformedToken   -- not a parseable JWT, or claims missing/ill-typed
         InvalidSignature -- parseable, but not signed with this secret
         TokenExpired     -- correctly signed, but exp has passed
       The signature is checked before expiry, so a tampered expired token is
       reported as InvalidSignature.

  Passwords: bcrypt used directly (no passlib wrapper). The cost factor comes
       from Settings.bcrypt_rounds. bcrypt only looks at the first 72 bytes of
       its input and current releases refuse longer input, so the issuer
       rejects longer passwords at registration (MAX_PASSWORD_BYTES).

Layer rule: no imports from api/, directory/, or client/. Import from core/
is allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from core.config import get_settings

logger = logging.getLogger("empdir.auth.tokens")

_ALGORITHM = "HS256"

MAX_PASSWORD_BYTES = 72


# ---------------------------------------------------------------------------
# Codec errors
# ---------------------------------------------------------------------------


class TokenError(Exception):
    """Base class for every reason verify() can reject a token."""


class MalformedToken(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def issue(subject: int, secret: str, ttl_seconds: int) -> str:
    """Encode a signed token for subject that expires ttl_seconds from now.

    sub is stored as a string because RFC 7519 (and python-jose's claim
    validation) require a string subject. verify() converts it back.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(subject),
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def verify(token: str, secret: str) -> int:
    """Verify token against secret and return the subject user id.

    Raises MalformedToken, InvalidSignature or TokenExpired. Never returns
    a subject from a token that failed any check.
    """
    try:
        jwt.get_unverified_header(token)
        jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise MalformedToken(str(exc)) from exc

    try:
        payload = jwt.decode(token, secret, algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise TokenExpired(str(exc)) from exc
    except JWTClaimsError as exc:
        # Signature already checked; a registered claim has the wrong type.
        raise MalformedToken(str(exc)) from exc
    except JWTError as exc:
        raise InvalidSignature(str(exc)) from exc

    sub = payload.get("sub")
    if sub is None or "exp" not in payload:
        raise MalformedToken("Token is missing the sub or exp claim")
    try:
        return int(sub)
    except (TypeError, ValueError) as exc:
        raise MalformedToken(f"Subject is not a user id: {sub!r}") from exc


def create_access_token(user_id: int) -> str:
    """Issue a token for user_id with the configured secret and lifetime."""
    settings = get_settings()
    return issue(user_id, settings.secret_key, settings.token_expire_seconds)


def decode_access_token(token: str) -> int:
    """Verify a token with the configured secret. Raises TokenError subclasses."""
    return verify(token, get_settings().secret_key)


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password."""
    rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    Over-long input and corrupt hashes both make bcrypt raise ValueError;
    either way the password does not match.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


@lru_cache(maxsize=1)
def dummy_hash() -> str:
    """A hash to check against when the account does not exist.

    Computed once, on first use, at the configured cost so that a failed
    lookup takes as long as a wrong password.
    """
    return hash_password("employee-directory-timing-dummy")
