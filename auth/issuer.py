"""
auth/issuer.py -- Registration and login: verify credentials, issue tokens.

register() and login() take the UserStore explicitly and return an
IssuedToken (user + bearer token). Failures are raised as core.errors
exceptions; the API layer renders them.

Duplicate detection:
  register() checks username, then email, before inserting, so the error
  names the username when both collide. The checks and the insert are not
  one transaction: two concurrent registrations can both pass the checks.
  The UNIQUE constraints reject the second insert, and _duplicate_error()
  maps that IntegrityError back to the same field-specific error -- first by
  re-running the lookups against committed state (keeps the username-first
  order), then by reading the constraint name from the driver message.

Login failures:
  Unknown email and wrong password raise the identical InvalidCredentials.
  bcrypt runs against dummy_hash() for unknown emails so response time does
  not reveal whether an account exists either.

Layer rule: no imports from api/, directory/, or client/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import IssuedToken, User
from auth.store import UserStore, conflicting_field
from auth.tokens import MAX_PASSWORD_BYTES, create_access_token, dummy_hash, hash_password, verify_password
from core.errors import (
    DuplicateEmail,
    DuplicateResource,
    DuplicateUsername,
    InternalError,
    InvalidCredentials,
    ValidationError,
)

logger = logging.getLogger("empdir.auth.issuer")


def register(store: UserStore, username: str | None, email: str | None, password: str | None) -> IssuedToken:
    """Create a user and issue its first token.

    Raises ValidationError, DuplicateUsername, DuplicateEmail or InternalError.
    """
    username = (username or "").strip()
    email = (email or "").strip()
    if not username or not email or not password:
        raise ValidationError("Username, email and password are required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    try:
        _check_available(store, username, email)
        new_user = User(username=username, email=email, hashed_password=hash_password(password))
        try:
            user_id = store.create_user(new_user)
        except IntegrityError as exc:
            raise _duplicate_error(store, username, email, exc) from exc
        created = store.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Registration failed for %r", username)
        raise InternalError() from exc

    if created is None:
        raise InternalError("User not found after write")
    logger.info("Registered user %d (%s)", created.id, created.username)
    return IssuedToken(user=created, token=create_access_token(created.id))


def login(store: UserStore, email: str | None, password: str | None) -> IssuedToken:
    """Verify email + password and issue a token. Raises InvalidCredentials or InternalError."""
    email = (email or "").strip()
    password = password or ""
    try:
        user = store.get_by_email(email) if email else None
    except SQLAlchemyError as exc:
        logger.exception("Credential lookup failed")
        raise InternalError() from exc

    if user is None:
        verify_password(password, dummy_hash())
        logger.info("Login rejected: unknown email")
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        logger.info("Login rejected: wrong password for user %d", user.id)
        raise InvalidCredentials()

    return IssuedToken(user=user, token=create_access_token(user.id))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_available(store: UserStore, username: str, email: str) -> None:
    if store.get_by_username(username) is not None:
        raise DuplicateUsername()
    if store.get_by_email(email) is not None:
        raise DuplicateEmail()


def _duplicate_error(store: UserStore, username: str, email: str, exc: IntegrityError) -> DuplicateResource:
    """Translate a uniqueness violation on insert into the field-specific error."""
    try:
        _check_available(store, username, email)
    except DuplicateResource as dup:
        logger.info("Registration race on %s resolved as %s", username, type(dup).__name__)
        return dup

    field = conflicting_field(exc)
    if field == "username":
        return DuplicateUsername()
    if field == "email":
        return DuplicateEmail()
    # Not a users uniqueness violation after all.
    raise exc
