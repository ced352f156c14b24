"""Sign-up, sign-in, sign-out, token refresh and password change."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NoReturn

from carlot.domain.auth import AuthSession, SignUpProfile
from carlot.domain.errors import ConflictError, UnauthorizedError, UpstreamError, ValidationError
from carlot.domain.result import Err
from carlot.ports.auth_service import AuthService
from carlot.use_cases.vendor_session import VendorSession

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _raise_for(err: Err, client_error: type[Exception]) -> NoReturn:
    # Errs carrying a cause are service failures, the rest are rejections
    if err.cause is not None:
        logger.error("Auth service call failed", exc_info=err.cause, extra={"error": err.message})
        raise UpstreamError("Authentication service unavailable")
    raise client_error(err.message)


def _require(value: str, field: str, label: str) -> dict[str, str] | None:
    if not value or not value.strip():
        return {"field": field, "message": f"{label} is required"}
    return None


@dataclass(frozen=True, slots=True)
class SignUpRequest:
    email: str
    password: str
    full_name: str
    phone: str | None = None


class SignUp:
    def __init__(self, auth_service: AuthService) -> None:
        self._auth = auth_service

    def execute(self, request: SignUpRequest) -> AuthSession:
        """
        Raises:
            ValidationError: If a field is missing or the password too short
            ConflictError: If the email is already registered
            UpstreamError: If the auth service failed
        """
        errors = [
            error
            for error in (
                _require(request.email, "email", "Email"),
                _require(request.full_name, "full_name", "Full name"),
            )
            if error
        ]
        if len(request.password or "") < MIN_PASSWORD_LENGTH:
            errors.append(
                {
                    "field": "password",
                    "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                }
            )
        if errors:
            raise ValidationError(errors=errors)

        result = self._auth.sign_up(
            request.email,
            request.password,
            SignUpProfile(full_name=request.full_name.strip(), phone=request.phone),
        )
        if isinstance(result, Err):
            _raise_for(result, ConflictError)
        return result.value


class SignIn:
    def __init__(self, auth_service: AuthService) -> None:
        self._auth = auth_service

    def execute(self, email: str, password: str) -> AuthSession:
        errors = [
            error
            for error in (_require(email, "email", "Email"), _require(password, "password", "Password"))
            if error
        ]
        if errors:
            raise ValidationError(errors=errors)
        result = self._auth.sign_in(email, password)
        if isinstance(result, Err):
            _raise_for(result, UnauthorizedError)
        return result.value


class SignOut:
    def __init__(self, auth_service: AuthService) -> None:
        self._auth = auth_service

    def execute(self, access_token: str) -> None:
        result = self._auth.sign_out(access_token)
        if isinstance(result, Err):
            _raise_for(result, UnauthorizedError)


class RefreshSession:
    def __init__(self, auth_service: AuthService) -> None:
        self._auth = auth_service

    def execute(self, refresh_token: str) -> AuthSession:
        result = self._auth.refresh_session(refresh_token)
        if isinstance(result, Err):
            _raise_for(result, UnauthorizedError)
        return result.value


@dataclass(frozen=True, slots=True)
class ChangePasswordRequest:
    current_password: str
    new_password: str
    confirm_password: str


class ChangePassword:
    """
    Change the signed-in vendor's password.

    The current password is checked by signing in with it; the password is
    then updated through the session that sign-in opened.
    """

    def __init__(self, session: VendorSession, auth_service: AuthService) -> None:
        self._session = session
        self._auth = auth_service

    def execute(self, request: ChangePasswordRequest) -> None:
        vendor = self._session.require_vendor()
        if request.new_password != request.confirm_password:
            raise ValidationError(
                "New passwords do not match",
                errors=[{"field": "confirm_password", "message": "New passwords do not match"}],
            )
        if len(request.new_password) < MIN_PASSWORD_LENGTH:
            message = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            raise ValidationError(message, errors=[{"field": "new_password", "message": message}])

        check = self._auth.sign_in(vendor.email, request.current_password)
        if isinstance(check, Err):
            if check.cause is not None:
                _raise_for(check, UnauthorizedError)
            raise ValidationError(
                "Current password is incorrect",
                errors=[{"field": "current_password", "message": "Current password is incorrect"}],
            )
        updated = self._auth.update_password(check.value.access_token, request.new_password)
        if isinstance(updated, Err):
            _raise_for(updated, UnauthorizedError)
        logger.info("Password changed", extra={"vendor_id": vendor.id})
