"""
auth/dependencies.py -- FastAPI Depends() helper that resolves the caller's identity.

resolve_identity() runs before every protected route (the employees router
installs it as a router-level dependency). For each request it:

  1. extracts the bearer token from the Authorization header,
  2. verifies it with the token codec,
  3. looks the subject up in the UserStore,
  4. stores the user id on request.state.user_id and returns it.

Nothing is cached between requests. A user removed after their token was
issued is locked out on the very next request, at the cost of one primary
key lookup per request.

Every rejection is Unauthenticated (401) with a reason-specific message that
is also logged. A database failure during the lookup is InternalError (500):
an outage must not look like "not logged in" to the client.

Layer rule: no imports from directory/ or client/. This module may import
from fastapi because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError

from auth.store import UserStore
from auth.tokens import TokenExpired, TokenError, decode_access_token
from core.errors import InternalError, Unauthenticated

logger = logging.getLogger("empdir.auth.resolver")

_BEARER = "bearer"


def bearer_token(authorization: str | None) -> str | None:
    """Return the raw token from an Authorization header value, or None if absent.

    "Bearer <token>" yields <token> (scheme is case-insensitive). A header in
    any other scheme is returned whole so verification rejects it as an
    invalid token rather than reporting that no token was sent.
    """
    if not authorization or not authorization.strip():
        return None
    scheme, _, credentials = authorization.strip().partition(" ")
    if scheme.lower() == _BEARER:
        return credentials.strip() or None
    return authorization.strip()


def resolve_identity(request: Request) -> int:
    """Require a valid bearer token naming an existing user; return that user's id.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user_id: int = Depends(resolve_identity)): ...
    """
    where = f"{request.method} {request.url.path}"
    token = bearer_token(request.headers.get("Authorization"))
    if token is None:
        logger.info("Rejected %s: no token provided", where)
        raise Unauthenticated("No token provided")

    try:
        user_id = decode_access_token(token)
    except TokenExpired:
        logger.info("Rejected %s: token expired", where)
        raise Unauthenticated("Token expired") from None
    except TokenError as exc:
        logger.info("Rejected %s: invalid token (%s: %s)", where, type(exc).__name__, exc)
        raise Unauthenticated("Invalid token") from None

    user_store: UserStore = request.app.state.user_store
    try:
        user = user_store.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("User lookup failed while resolving %s", where)
        raise InternalError() from exc

    if user is None:
        logger.info("Rejected %s: user %d not found", where, user_id)
        raise Unauthenticated("User not found")

    request.state.user_id = user.id
    return user.id
