"""Tests for the identity provider session wrapper."""

from __future__ import annotations

import json

import httpx
import pytest

from kivo_admin.auth import SIGNED_IN, SIGNED_OUT, AuthError, AuthService


def gotrue(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/auth/v1/token":
        body = json.loads(request.content)
        if body["password"] == "correct-horse":
            local = body["email"].split("@")[0]
            return httpx.Response(
                200,
                json={
                    "access_token": f"jwt-{local}",
                    "refresh_token": f"refresh-{local}",
                    "user": {"id": f"id-{local}", "email": body["email"]},
                },
            )
        return httpx.Response(
            400,
            json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
        )
    if request.url.path == "/auth/v1/logout":
        return httpx.Response(204)
    return httpx.Response(404)


def make_auth(handler=gotrue) -> AuthService:
    return AuthService("https://kivo.supabase.test", "anon-key", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_sign_in_sets_session_and_notifies() -> None:
    auth = make_auth()
    events = []
    auth.on_auth_state_change(lambda event, session: events.append((event, session)))

    session = await auth.sign_in_with_password("ops@kivo.test", "correct-horse")
    await auth.close()

    assert auth.is_authenticated("jwt-ops")
    assert auth.get_session("jwt-ops") == session
    assert session.access_token == "jwt-ops"
    assert session.email == "ops@kivo.test"
    assert events == [(SIGNED_IN, session)]


@pytest.mark.asyncio
async def test_unknown_or_missing_token_has_no_session() -> None:
    auth = make_auth()
    await auth.sign_in_with_password("ops@kivo.test", "correct-horse")
    await auth.close()

    assert auth.get_session(None) is None
    assert auth.get_session("") is None
    assert not auth.is_authenticated("jwt-somebody-else")


@pytest.mark.asyncio
async def test_wrong_password_raises() -> None:
    auth = make_auth()

    with pytest.raises(AuthError, match="Invalid login credentials"):
        await auth.sign_in_with_password("ops@kivo.test", "password")
    await auth.close()

    assert not auth.is_authenticated("jwt-ops")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>gateway</html>"),
        httpx.Response(200, json={"user": {"id": "u1"}}),
        httpx.Response(200, json=["jwt-abc"]),
    ],
)
async def test_successful_status_without_session_raises(response: httpx.Response) -> None:
    auth = make_auth(lambda request: response)

    with pytest.raises(AuthError, match="no session"):
        await auth.sign_in_with_password("ops@kivo.test", "correct-horse")
    await auth.close()


@pytest.mark.asyncio
async def test_unconfigured_provider_refuses_sign_in() -> None:
    auth = AuthService("", "")

    with pytest.raises(AuthError, match="not configured"):
        await auth.sign_in_with_password("admin@kivo.com", "password")
    await auth.close()


@pytest.mark.asyncio
async def test_sign_out_only_ends_that_session() -> None:
    auth = make_auth()
    await auth.sign_in_with_password("ops@kivo.test", "correct-horse")
    await auth.sign_in_with_password("lead@kivo.test", "correct-horse")

    await auth.sign_out("jwt-ops")
    await auth.sign_out("jwt-not-issued")
    await auth.close()

    assert not auth.is_authenticated("jwt-ops")
    assert auth.is_authenticated("jwt-lead")


@pytest.mark.asyncio
async def test_sign_out_clears_session_even_when_provider_fails() -> None:
    def flaky(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/auth/v1/logout":
            raise httpx.ConnectError("down", request=request)
        return gotrue(request)

    auth = make_auth(flaky)
    events = []
    session = await auth.sign_in_with_password("ops@kivo.test", "correct-horse")
    auth.on_auth_state_change(lambda event, session: events.append(event))

    await auth.sign_out(session.access_token)
    await auth.close()

    assert not auth.is_authenticated(session.access_token)
    assert events == [SIGNED_OUT]


@pytest.mark.asyncio
async def test_unsubscribe_stops_notifications() -> None:
    auth = make_auth()
    events = []
    subscription = auth.on_auth_state_change(lambda event, session: events.append(event))
    subscription.unsubscribe()

    await auth.sign_in_with_password("ops@kivo.test", "correct-horse")
    await auth.close()

    assert events == []
