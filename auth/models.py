"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in directory/models.py -- dataclasses own domain shape; stores, the issuer
and routes do the work.

Layer rule: no imports from api/, directory/, or client/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered identity.

    username and email are each globally unique (enforced by named UNIQUE
    constraints in auth/store.py). hashed_password is a bcrypt hash and never
    leaves the server -- API response models do not include it.

    id is None before the record is written to the database.
    """

    username: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None  # ISO 8601, set by store on insert
    updated_at: str | None = None


@dataclass
class IssuedToken:
    """Result of a successful register() or login(): the identity plus its token."""

    user: User
    token: str
