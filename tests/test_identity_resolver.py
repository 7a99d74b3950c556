"""
tests/test_identity_resolver.py -- Integration tests for resolve_identity().

Drives a protected route (GET /employees) through the real app so the
dependency, the exception handler and the {"message"} body are exercised
together.

Covers:
  - each 401 reason: no token, expired, invalid (garbage, wrong secret,
    wrong scheme), user not found
  - WWW-Authenticate: Bearer on every 401
  - a store failure during lookup is a 500, not a 401
  - bearer_token() header parsing
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from auth.dependencies import bearer_token
from auth.tokens import issue
from core.config import get_settings


def _get(client: TestClient, authorization: str | None = None):
    headers = {"Authorization": authorization} if authorization is not None else {}
    return client.get("/employees", headers=headers)


class TestBearerToken:
    @pytest.mark.parametrize(
        "header,expected",
        [
            (None, None),
            ("", None),
            ("   ", None),
            ("Bearer", None),
            ("Bearer    ", None),
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("bearer abc.def.ghi", "abc.def.ghi"),
            ("BEARER  abc.def.ghi ", "abc.def.ghi"),
            ("Basic dXNlcjpwYXNz", "Basic dXNlcjpwYXNz"),
        ],
    )
    def test_parsing(self, header, expected) -> None:
        assert bearer_token(header) == expected


class TestRejections:
    def test_no_header(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        resp = _get(client)
        assert resp.status_code == 401
        assert resp.json() == {"message": "No token provided"}
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_empty_bearer(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        resp = _get(client, "Bearer ")
        assert resp.status_code == 401
        assert resp.json()["message"] == "No token provided"

    def test_garbage_token(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        resp = _get(client, "Bearer not-a-token")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid token"}
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_wrong_secret(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, uid = api_client
        forged = issue(uid, "x" * 32, 60)
        resp = _get(client, f"Bearer {forged}")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid token"

    def test_wrong_scheme(self, api_client: tuple[TestClient, str, int]) -> None:
        client, token, _uid = api_client
        resp = _get(client, f"Token {token}")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid token"

    def test_expired_token(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, uid = api_client
        expired = issue(uid, get_settings().secret_key, -1)
        resp = _get(client, f"Bearer {expired}")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Token expired"}

    def test_unknown_user(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        ghost = issue(999_999, get_settings().secret_key, 60)
        resp = _get(client, f"Bearer {ghost}")
        assert resp.status_code == 401
        assert resp.json() == {"message": "User not found"}

    def test_deleted_user_loses_access_immediately(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        reg = client.post(
            "/users/register",
            json={"username": "shortlived", "email": "shortlived@example.com", "password": "secret123"},
        )
        assert reg.status_code == 201
        token, user_id = reg.json()["token"], reg.json()["id"]
        assert _get(client, f"Bearer {token}").status_code == 200

        with client.app.state.user_store.engine.begin() as conn:
            conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": user_id})

        resp = _get(client, f"Bearer {token}")
        assert resp.status_code == 401
        assert resp.json()["message"] == "User not found"


class TestAccepted:
    def test_valid_token(self, api_client: tuple[TestClient, str, int]) -> None:
        client, token, _uid = api_client
        resp = _get(client, f"Bearer {token}")
        assert resp.status_code == 200

    def test_lowercase_scheme(self, api_client: tuple[TestClient, str, int]) -> None:
        client, token, _uid = api_client
        assert _get(client, f"bearer {token}").status_code == 200


class TestStoreFailure:
    def test_lookup_error_is_500_not_401(self, api_client: tuple[TestClient, str, int], monkeypatch) -> None:
        client, token, _uid = api_client
        user_store = client.app.state.user_store

        def _boom(user_id):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(user_store, "get_by_id", _boom)
        resp = _get(client, f"Bearer {token}")
        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error"}
        assert "locked" not in resp.text
