from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from carlot.adapters.auth_listeners import AuthListenerRegistry
from carlot.adapters.in_memory_store import new_id
from carlot.adapters.password_hashing import hash_password, verify_password
from carlot.domain.auth import AuthEvent, AuthEventType, AuthSession, AuthUser, SignUpProfile
from carlot.domain.result import Err, Ok, Result
from carlot.ports.auth_service import AuthListener, AuthService


_UNAVAILABLE = Err("auth service unavailable", cause=ConnectionError("auth service unavailable"))


@dataclass
class _User:
    id: str
    email: str
    password_hash: str
    user_metadata: dict[str, Any] = field(default_factory=dict)


class InMemoryAuthService(AuthService):
    """
    Canonical contract implementation for tests.

    Uses a low hash iteration count; sessions never expire unless
    ``expire(access_token)`` is called.
    """

    def __init__(self, listeners: AuthListenerRegistry | None = None) -> None:
        self._listeners = listeners or AuthListenerRegistry()
        self._users: dict[str, _User] = {}
        self._sessions: dict[str, AuthSession] = {}
        self.unavailable = False

    def add_user(self, email: str, password: str, metadata: dict[str, Any] | None = None) -> AuthUser:
        user = _User(
            id=new_id(),
            email=email.strip().lower(),
            password_hash=hash_password(password, iterations=1000),
            user_metadata=metadata or {},
        )
        self._users[user.id] = user
        return self._public(user)

    def issue_session(self, user: AuthUser) -> AuthSession:
        session = AuthSession(
            access_token=secrets.token_urlsafe(16),
            refresh_token=secrets.token_urlsafe(16),
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
            user=user,
        )
        self._sessions[session.access_token] = session
        return session

    def expire(self, access_token: str) -> None:
        self._sessions.pop(access_token, None)

    def get_session(self, access_token: str) -> Result[AuthSession | None]:
        if self.unavailable:
            return _UNAVAILABLE
        return Ok(self._sessions.get(access_token))

    def sign_in(self, email: str, password: str) -> Result[AuthSession]:
        if self.unavailable:
            return _UNAVAILABLE
        user = self._find(email)
        if user is None or not verify_password(user.password_hash, password):
            return Err("Invalid login credentials")
        session = self.issue_session(self._public(user))
        self._listeners.emit(AuthEvent(AuthEventType.SIGNED_IN, session))
        return Ok(session)

    def sign_up(self, email: str, password: str, profile: SignUpProfile) -> Result[AuthSession]:
        if self.unavailable:
            return _UNAVAILABLE
        if self._find(email) is not None:
            return Err("User already registered")
        user = self.add_user(email, password, profile.as_metadata())
        session = self.issue_session(user)
        self._listeners.emit(AuthEvent(AuthEventType.SIGNED_IN, session))
        return Ok(session)

    def sign_out(self, access_token: str) -> Result[None]:
        if self.unavailable:
            return _UNAVAILABLE
        session = self._sessions.pop(access_token, None)
        if session is not None:
            self._listeners.emit(AuthEvent(AuthEventType.SIGNED_OUT, user_id=session.user.id))
        return Ok(None)

    def refresh_session(self, refresh_token: str) -> Result[AuthSession]:
        if self.unavailable:
            return _UNAVAILABLE
        for token, session in list(self._sessions.items()):
            if session.refresh_token == refresh_token:
                del self._sessions[token]
                fresh = self.issue_session(session.user)
                self._listeners.emit(AuthEvent(AuthEventType.TOKEN_REFRESHED, fresh))
                return Ok(fresh)
        return Err("Invalid refresh token")

    def update_password(self, access_token: str, new_password: str) -> Result[None]:
        if self.unavailable:
            return _UNAVAILABLE
        session = self._sessions.get(access_token)
        if session is None:
            return Err("Auth session missing")
        self._users[session.user.id].password_hash = hash_password(new_password, iterations=1000)
        return Ok(None)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    def _find(self, email: str) -> _User | None:
        email_norm = email.strip().lower()
        for user in self._users.values():
            if user.email == email_norm:
                return user
        return None

    def _public(self, user: _User) -> AuthUser:
        return AuthUser(id=user.id, email=user.email, user_metadata=dict(user.user_metadata))
