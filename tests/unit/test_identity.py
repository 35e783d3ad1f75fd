"""Unit tests for the identity-provider client."""

from datetime import timedelta

import pytest
from jose import jwt
from starlette.requests import Request

from research_desk.core.errors import AuthenticationError
from research_desk.security.identity import AuthUser, IdentityClient

SECRET = "unit-test-secret"


def _client(**kwargs) -> IdentityClient:
    return IdentityClient(secret_key=SECRET, audience="authenticated", **kwargs)


def _request(headers=None, cookies=None) -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


def test_issue_and_verify_token():
    """A token issued by the client verifies back to the same principal."""
    client = _client()
    token = client.issue_token("user-1", email="u1@example.com")

    user = client.verify_credentials(token)

    assert user == AuthUser(id="user-1", email="u1@example.com")


def test_expired_token_is_rejected():
    client = _client()
    token = client.issue_token("user-1", expires_delta=timedelta(seconds=-30))

    with pytest.raises(AuthenticationError):
        client.verify_credentials(token)


def test_wrong_secret_is_rejected():
    token = IdentityClient(secret_key="other-secret", audience="authenticated").issue_token("user-1")

    assert _client().get_user(token) is None


def test_wrong_audience_is_rejected():
    token = IdentityClient(secret_key=SECRET, audience="service").issue_token("user-1")

    with pytest.raises(AuthenticationError):
        _client().verify_credentials(token)


def test_token_without_subject_is_rejected():
    token = jwt.encode({"aud": "authenticated", "type": "access"}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        _client().verify_credentials(token)


def test_refresh_token_is_not_accepted_as_access():
    token = jwt.encode(
        {"sub": "user-1", "aud": "authenticated", "type": "refresh"}, SECRET, algorithm="HS256"
    )

    assert _client().get_user(token) is None


def test_get_user_handles_missing_token():
    assert _client().get_user(None) is None
    assert _client().get_user("") is None
    assert _client().get_user("not-a-jwt") is None


def test_current_user_from_bearer_header():
    client = _client()
    request = _request(headers={"Authorization": f"Bearer {client.issue_token('user-2')}"})

    user = client.get_current_user(request)

    assert user is not None
    assert user.id == "user-2"


def test_current_user_from_session_cookie():
    client = _client(cookie_name="sb-access-token")
    request = _request(cookies={"sb-access-token": client.issue_token("user-3")})

    user = client.get_current_user(request)

    assert user is not None
    assert user.id == "user-3"


def test_non_bearer_authorization_is_ignored():
    client = _client()
    request = _request(headers={"Authorization": "Basic dXNlcjpwYXNz"})

    assert client.get_current_user(request) is None
