"""Session handling on top of the Supabase identity provider."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx
from fastapi import Depends, Header, HTTPException, Request, status
from pydantic import BaseModel

from kivo_admin.config import Settings

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


class AuthError(RuntimeError):
    """Raised when the identity provider refuses or cannot process a sign-in."""


class AuthSession(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    user_id: str
    email: Optional[str] = None


AuthListener = Callable[[str, Optional[AuthSession]], None]


class Subscription:
    def __init__(self, listeners: list[AuthListener], listener: AuthListener) -> None:
        self._listeners = listeners
        self._listener = listener

    def unsubscribe(self) -> None:
        if self._listener in self._listeners:
            self._listeners.remove(self._listener)


class AuthService:
    """Tracks signed-in admin sessions and exchanges credentials with GoTrue."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._configured = bool(base_url and api_key)
        self._client = httpx.AsyncClient(
            base_url=f"{(base_url or 'http://localhost').rstrip('/')}/auth/v1",
            timeout=timeout,
            transport=transport,
            headers={"apikey": api_key},
        )
        # one entry per signed-in admin, keyed by GoTrue access token
        self._sessions: dict[str, AuthSession] = {}
        self._listeners: list[AuthListener] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> AuthService:
        return cls(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.request_timeout,
        )

    def is_authenticated(self, access_token: Optional[str]) -> bool:
        return self.get_session(access_token) is not None

    def get_session(self, access_token: Optional[str]) -> Optional[AuthSession]:
        if not access_token:
            return None
        return self._sessions.get(access_token)

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self._listeners, listener)

    def _notify(self, event: str, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        if not self._configured:
            raise AuthError("Identity provider is not configured.")
        try:
            response = await self._client.post(
                "/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as exc:
            raise AuthError(f"Identity provider unreachable: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            payload = payload if isinstance(payload, dict) else {}
            detail = (
                payload.get("error_description")
                or payload.get("msg")
                or "Invalid login credentials"
            )
            raise AuthError(detail)

        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise AuthError("Identity provider returned no session.")

        user = payload.get("user") or {}
        session = AuthSession(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            user_id=str(user.get("id", "")),
            email=user.get("email", email),
        )
        self._sessions[session.access_token] = session
        self._notify(SIGNED_IN, session)
        logger.info("Admin %s signed in", session.email)
        return session

    async def sign_out(self, access_token: Optional[str]) -> None:
        """End the session behind ``access_token``; other admins stay signed in."""
        session = self.get_session(access_token)
        if session is None:
            return
        try:
            await self._client.post(
                "/logout",
                headers={"Authorization": f"Bearer {session.access_token}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Remote sign-out failed, clearing local session: %s", exc)
        self._sessions.pop(session.access_token, None)
        self._notify(SIGNED_OUT, None)

    async def close(self) -> None:
        await self._client.aclose()


# ── FastAPI dependencies ─────────────────────────────────────────────────────

def get_auth(request: Request) -> AuthService:
    return request.app.state.auth


def bearer_token(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Optional[str]:
    """Return the token of an ``Authorization: Bearer <token>`` header, if any."""

    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_session(
    token: Optional[str] = Depends(bearer_token),
    auth: AuthService = Depends(get_auth),
) -> AuthSession:
    session = auth.get_session(token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
