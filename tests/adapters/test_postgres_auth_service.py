"""Unit tests for PostgresAuthService with a mocked session."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from carlot.adapters.auth_listeners import AuthListenerRegistry
from carlot.adapters.password_hashing import hash_password
from carlot.adapters.postgres_auth_service import INVALID_CREDENTIALS, PostgresAuthService
from carlot.domain.auth import AuthEvent, AuthEventType
from carlot.infra.db.models import AuthSessionRow, AuthUserRow

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
USER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000aa")


@pytest.fixture()
def mock_session() -> Mock:
    return Mock(spec=Session)


@pytest.fixture()
def events() -> list[AuthEvent]:
    return []


@pytest.fixture()
def service(mock_session: Mock, events: list[AuthEvent]) -> PostgresAuthService:
    listeners = AuthListenerRegistry()
    listeners.subscribe(events.append)
    return PostgresAuthService(mock_session, listeners, hash_iterations=1000, clock=lambda: NOW)


def _user() -> AuthUserRow:
    return AuthUserRow(
        id=USER_ID,
        email="dealer@example.com",
        password_hash=hash_password("secret1", iterations=1000),
        user_metadata={"full_name": "Dealer One"},
    )


def _session_row(expires_at: datetime) -> AuthSessionRow:
    return AuthSessionRow(
        access_token="access",
        refresh_token="refresh",
        user_id=USER_ID,
        expires_at=expires_at,
        refresh_expires_at=expires_at + timedelta(days=30),
    )


def test_get_session_resolves_live_token(service: PostgresAuthService, mock_session: Mock) -> None:
    mock_session.get.side_effect = [_session_row(NOW + timedelta(minutes=5)), _user()]

    auth_session = service.get_session("access").value

    assert auth_session.user.id == str(USER_ID)
    assert auth_session.user.user_metadata == {"full_name": "Dealer One"}


def test_get_session_treats_expired_token_as_unknown(service: PostgresAuthService, mock_session: Mock) -> None:
    mock_session.get.return_value = _session_row(NOW - timedelta(seconds=1))

    assert service.get_session("access").value is None


def test_sign_in_issues_session_and_emits(
    service: PostgresAuthService, mock_session: Mock, events: list[AuthEvent]
) -> None:
    user = _user()
    mock_session.execute.return_value.scalar_one_or_none.return_value = user

    auth_session = service.sign_in(" Dealer@Example.com", "secret1").value

    assert auth_session.expires_at == NOW + timedelta(hours=1)
    assert user.last_sign_in_at == NOW
    assert isinstance(mock_session.add.call_args.args[0], AuthSessionRow)
    mock_session.commit.assert_called_once()
    assert [e.type for e in events] == [AuthEventType.SIGNED_IN]


def test_sign_in_with_wrong_password_is_a_rejection(
    service: PostgresAuthService, mock_session: Mock, events: list[AuthEvent]
) -> None:
    mock_session.execute.return_value.scalar_one_or_none.return_value = _user()

    result = service.sign_in("dealer@example.com", "nope")

    assert result.ok is False
    assert result.message == INVALID_CREDENTIALS
    assert result.cause is None
    assert events == []


def test_database_failure_carries_cause(service: PostgresAuthService, mock_session: Mock) -> None:
    mock_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))

    result = service.sign_in("dealer@example.com", "secret1")

    assert result.ok is False
    assert isinstance(result.cause, OperationalError)
    mock_session.rollback.assert_called_once()


def test_sign_out_emits_signed_out(
    service: PostgresAuthService, mock_session: Mock, events: list[AuthEvent]
) -> None:
    mock_session.execute.return_value.scalar_one_or_none.return_value = USER_ID

    assert service.sign_out("access").ok

    assert events[-1].type is AuthEventType.SIGNED_OUT
    assert events[-1].subject == str(USER_ID)


def test_refresh_with_expired_refresh_token(service: PostgresAuthService, mock_session: Mock) -> None:
    mock_session.execute.return_value.scalar_one_or_none.return_value = _session_row(NOW - timedelta(days=31))

    result = service.refresh_session("refresh")

    assert result.ok is False
    assert result.cause is None
