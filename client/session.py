"""
client/session.py -- Client-side session manager for the employee directory API.

SessionManager is the single owner of the client's bearer token. Callers
never read or attach the token themselves; they call methods on the manager.

State machine:

    ANONYMOUS --(login / register succeeds)--> AUTHENTICATED
    AUTHENTICATED --(401 on a protected call, or logout())--> ANONYMOUS

  * Start-up: AUTHENTICATED if the token store already holds a token. That
    token is only trusted until the server first rejects it.
  * While AUTHENTICATED every request carries "Authorization: Bearer <token>";
    while ANONYMOUS none do.
  * A 401 from any call other than login/register ends the session: the
    stored token is cleared, on_logout() fires (the caller's redirect to its
    login entry point) and AuthenticationRequired is raised. A failed login
    raises ApiError and leaves the session untouched.
  * Ending the session is idempotent. If a 401 and an explicit logout() both
    happen, on_logout() fires once.
  * No retry, no refresh: after a 401 the user must log in again.

HTTP goes through a requests.Session by default. Anything with a compatible
request(method, url, json=, headers=, timeout=) method works, which is how
the tests drive the real FastAPI app through its TestClient.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

import requests

from client.token_store import MemoryTokenStore

logger = logging.getLogger("empdir.client.session")

# Requests to these paths are credential submissions: a rejection there is a
# failed login, not the end of an existing session.
_CREDENTIAL_PATHS = frozenset({"/users/login", "/users/register"})


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class ApiError(Exception):
    """A request failed. status_code is 0 when the server could not be reached."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


class AuthenticationRequired(ApiError):
    """The server answered 401 to a protected request. The session has ended."""


class SessionManager:
    """Holds the bearer token, attaches it, and ends the session on rejection.

    Usage:
        session = SessionManager("http://localhost:8000", FileTokenStore(path), on_logout=show_login)
        session.login("a@x.com", "secret123")
        session.list_employees()
        session.logout()
    """

    def __init__(
        self,
        base_url: str,
        token_store=None,
        on_logout: Callable[[], None] | None = None,
        http=None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._tokens = token_store if token_store is not None else MemoryTokenStore()
        self._on_logout = on_logout
        if http is None:
            # One pooled session per manager. The API never redirects more
            # than once, so cap redirects well below the requests default of 30.
            http = requests.Session()
            http.max_redirects = 3
        self._http = http
        self._token: str | None = self._tokens.load()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self._token else SessionState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        """Create an account and start a session with its token. Returns {id, username, email}."""
        data = self._send("POST", "/users/register", {"username": username, "email": email, "password": password})
        return self._begin(data)

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and start a session. Returns {id, username, email}."""
        data = self._send("POST", "/users/login", {"email": email, "password": password})
        return self._begin(data)

    def logout(self) -> bool:
        """End the session. Returns False (and does nothing) if already anonymous."""
        if self._token is None:
            return False
        self._token = None
        self._tokens.clear()
        logger.info("Session ended")
        if self._on_logout is not None:
            self._on_logout()
        return True

    # ------------------------------------------------------------------
    # API calls
    # ------------------------------------------------------------------

    def me(self) -> dict[str, Any]:
        return self._send("GET", "/users/me")

    def list_employees(self) -> list[dict[str, Any]]:
        return self._send("GET", "/employees")

    def get_employee(self, employee_id: int) -> dict[str, Any]:
        return self._send("GET", f"/employees/{employee_id}")

    def create_employee(self, name: str, company: str, city: str, phone_number: str) -> dict[str, Any]:
        body = {"name": name, "company": company, "city": city, "phone_number": phone_number}
        return self._send("POST", "/employees", body)

    def update_employee(
        self, employee_id: int, name: str, company: str, city: str, phone_number: str
    ) -> dict[str, Any]:
        body = {"name": name, "company": company, "city": city, "phone_number": phone_number}
        return self._send("PUT", f"/employees/{employee_id}", body)

    def delete_employee(self, employee_id: int) -> dict[str, Any]:
        return self._send("DELETE", f"/employees/{employee_id}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin(self, data: dict[str, Any]) -> dict[str, Any]:
        token = data.get("token")
        if not token:
            raise ApiError(0, "Server response did not include a token")
        self._token = token
        self._tokens.save(token)
        logger.info("Session started for %s", data.get("username"))
        return {k: data[k] for k in ("id", "username", "email") if k in data}

    def _send(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            resp = self._http.request(method, self.base_url + path, json=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ApiError(0, f"Could not reach {self.base_url}: {exc}") from exc

        if resp.status_code == 401 and path not in _CREDENTIAL_PATHS:
            message = _error_message(resp)
            logger.info("%s %s rejected with 401 (%s); ending session", method, path, message)
            self.logout()
            raise AuthenticationRequired(401, message)
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, _error_message(resp))
        return resp.json()


def _error_message(resp) -> str:
    """Pull {"message": ...} out of an error response, falling back to the raw text."""
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return resp.text or f"HTTP {resp.status_code}"
