"""PostgreSQL-backed implementation of the AuthService port."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carlot.adapters.auth_listeners import AuthListenerRegistry
from carlot.adapters.password_hashing import DEFAULT_ITERATIONS, hash_password, verify_password
from carlot.domain.auth import AuthEvent, AuthEventType, AuthSession, AuthUser, SignUpProfile
from carlot.domain.result import Err, Ok, Result
from carlot.infra.db.models.auth import AuthSessionRow, AuthUserRow
from carlot.ports.auth_service import AuthListener, AuthService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid login credentials"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PostgresAuthService(AuthService):
    """
    Email/password authentication stored in ``auth_users``/``auth_sessions``.

    - Passwords are PBKDF2-SHA256 hashed
    - Access and refresh tokens are opaque random strings with expiry
    - Refreshing rotates both tokens
    """

    def __init__(
        self,
        session: Session,
        listeners: AuthListenerRegistry,
        access_ttl_seconds: int = 3600,
        refresh_ttl_seconds: int = 60 * 60 * 24 * 30,
        hash_iterations: int = DEFAULT_ITERATIONS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._session = session
        self._listeners = listeners
        self._access_ttl = timedelta(seconds=access_ttl_seconds)
        self._refresh_ttl = timedelta(seconds=refresh_ttl_seconds)
        self._hash_iterations = hash_iterations
        self._clock = clock

    def get_session(self, access_token: str) -> Result[AuthSession | None]:
        try:
            row = self._session.get(AuthSessionRow, access_token)
            if row is None or row.expires_at <= self._clock():
                return Ok(None)
            user = self._session.get(AuthUserRow, row.user_id)
        except SQLAlchemyError as exc:
            return self._fail("auth.get_session", exc)
        if user is None:
            return Ok(None)
        return Ok(self._to_session(row, user))

    def sign_in(self, email: str, password: str) -> Result[AuthSession]:
        email_norm = email.strip().lower()
        try:
            user = self._session.execute(
                select(AuthUserRow).where(AuthUserRow.email == email_norm)
            ).scalar_one_or_none()
            if user is None or not verify_password(user.password_hash, password):
                return Err(INVALID_CREDENTIALS)
            user.last_sign_in_at = self._clock()
            session_row = self._issue(user)
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("auth.sign_in", exc)
        auth_session = self._to_session(session_row, user)
        self._listeners.emit(AuthEvent(AuthEventType.SIGNED_IN, auth_session))
        return Ok(auth_session)

    def sign_up(self, email: str, password: str, profile: SignUpProfile) -> Result[AuthSession]:
        email_norm = email.strip().lower()
        try:
            existing = self._session.execute(
                select(AuthUserRow.id).where(AuthUserRow.email == email_norm)
            ).scalar_one_or_none()
            if existing is not None:
                return Err("User already registered")
            user = AuthUserRow(
                email=email_norm,
                password_hash=hash_password(password, iterations=self._hash_iterations),
                user_metadata=profile.as_metadata(),
                last_sign_in_at=self._clock(),
            )
            self._session.add(user)
            self._session.flush()
            session_row = self._issue(user)
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("auth.sign_up", exc)
        logger.info("User signed up", extra={"user_id": str(user.id)})
        auth_session = self._to_session(session_row, user)
        self._listeners.emit(AuthEvent(AuthEventType.SIGNED_IN, auth_session))
        return Ok(auth_session)

    def sign_out(self, access_token: str) -> Result[None]:
        try:
            user_id = self._session.execute(
                delete(AuthSessionRow)
                .where(AuthSessionRow.access_token == access_token)
                .returning(AuthSessionRow.user_id)
            ).scalar_one_or_none()
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("auth.sign_out", exc)
        if user_id is None:
            return Ok(None)
        self._listeners.emit(AuthEvent(AuthEventType.SIGNED_OUT, user_id=str(user_id)))
        return Ok(None)

    def refresh_session(self, refresh_token: str) -> Result[AuthSession]:
        try:
            old = self._session.execute(
                select(AuthSessionRow).where(AuthSessionRow.refresh_token == refresh_token)
            ).scalar_one_or_none()
            if old is None or old.refresh_expires_at <= self._clock():
                return Err("Invalid refresh token")
            user = self._session.get(AuthUserRow, old.user_id)
            if user is None:
                return Err("Invalid refresh token")
            self._session.delete(old)
            session_row = self._issue(user)
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("auth.refresh_session", exc)
        auth_session = self._to_session(session_row, user)
        self._listeners.emit(AuthEvent(AuthEventType.TOKEN_REFRESHED, auth_session))
        return Ok(auth_session)

    def update_password(self, access_token: str, new_password: str) -> Result[None]:
        try:
            row = self._session.get(AuthSessionRow, access_token)
            if row is None or row.expires_at <= self._clock():
                return Err("Auth session missing")
            user = self._session.get(AuthUserRow, row.user_id)
            if user is None:
                return Err("Auth session missing")
            user.password_hash = hash_password(new_password, iterations=self._hash_iterations)
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("auth.update_password", exc)
        return Ok(None)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    def _issue(self, user: AuthUserRow) -> AuthSessionRow:
        now = self._clock()
        row = AuthSessionRow(
            access_token=secrets.token_urlsafe(32),
            refresh_token=secrets.token_urlsafe(32),
            user_id=user.id,
            expires_at=now + self._access_ttl,
            refresh_expires_at=now + self._refresh_ttl,
        )
        self._session.add(row)
        return row

    def _to_session(self, row: AuthSessionRow, user: AuthUserRow) -> AuthSession:
        return AuthSession(
            access_token=row.access_token,
            refresh_token=row.refresh_token,
            expires_at=row.expires_at,
            user=AuthUser(id=str(user.id), email=user.email, user_metadata=dict(user.user_metadata or {})),
        )

    def _fail(self, operation: str, exc: SQLAlchemyError) -> Err:
        self._session.rollback()
        logger.error("Auth operation failed", exc_info=exc, extra={"operation": operation})
        return Err.from_exception(exc, f"{operation} failed")
