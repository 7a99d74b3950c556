"""
core/errors.py -- Domain error taxonomy.

Every failure a component reports to its caller is one of these. Each class
carries the HTTP status it maps to, so the API layer renders all of them with
a single exception handler (api/main.py) as {"message": ...}.

  ValidationError     400  client input missing or malformed
  DuplicateResource   400  username / email already registered
  InvalidCredentials  400  login failed (deliberately generic)
  Unauthenticated     401  missing / invalid / expired token, or user gone
  NotFound            404  referenced record absent
  InternalError       500  store or unexpected failure

Layer rule: no imports from api/, auth/, directory/, or client/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that are reported to the client."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateResource(AppError):
    status_code = 400
    default_message = "Resource already exists"


class DuplicateUsername(DuplicateResource):
    default_message = "Username already exists"


class DuplicateEmail(DuplicateResource):
    default_message = "Email already exists"


class InvalidCredentials(AppError):
    status_code = 400
    default_message = "Invalid credentials"


class Unauthenticated(AppError):
    """The request carries no usable identity.

    The message names the reason (no token, expired, invalid, user gone) for
    server logs and API clients; browser-style clients treat every 401 alike.
    """

    status_code = 401
    default_message = "Not authenticated"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"
