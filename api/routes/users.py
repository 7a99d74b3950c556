"""
api/routes/users.py -- Registration, login and current-user REST endpoints.

Routes:
  POST /users/register  -- create an account; 201 {id, username, email, token}
  POST /users/login     -- password login;    200 {id, username, email, token}
  GET  /users/me        -- current user info (requires auth)

Tokens are returned in the JSON body only. The client keeps them and sends
them back as "Authorization: Bearer <token>"; the server stores no session.

Security:
  Login returns the same generic message for unknown email and wrong
  password. Use auth.issuer.login(), never inline store lookups here.
  Cache-Control: no-store on responses that carry a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError

from api.models import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from auth import issuer
from auth.dependencies import resolve_identity
from auth.store import UserStore
from core.errors import InternalError, NotFound

# Auth policy:
# - POST /users/register: public
# - POST /users/login:    public
# - GET  /users/me:       requires auth (resolve_identity)
router = APIRouter()


@router.post("/users/register", response_model=AuthResponse, status_code=201)
def register(request: Request, response: Response, body: RegisterRequest) -> AuthResponse:
    """Create an account and return it with a one-day bearer token."""
    user_store: UserStore = request.app.state.user_store
    issued = issuer.register(user_store, body.username, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse.from_issued(issued)


@router.post("/users/login", response_model=AuthResponse)
def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password and return a fresh bearer token."""
    user_store: UserStore = request.app.state.user_store
    issued = issuer.login(user_store, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse.from_issued(issued)


@router.get("/users/me", response_model=UserResponse)
def me(request: Request, user_id: int = Depends(resolve_identity)) -> UserResponse:
    """Return identity information for the authenticated caller.

    The resolver has just seen the user, but the record can vanish between
    the two lookups; that case is a 404 rather than a 401.
    """
    user_store: UserStore = request.app.state.user_store
    try:
        user = user_store.get_by_id(user_id)
    except SQLAlchemyError as exc:
        raise InternalError() from exc
    if user is None:
        raise NotFound("User not found")
    return UserResponse.from_user(user)
