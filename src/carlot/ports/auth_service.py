from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from carlot.domain.auth import AuthEvent, AuthSession, SignUpProfile
from carlot.domain.result import Result

AuthListener = Callable[[AuthEvent], None]


class AuthService(ABC):
    """
    Port for the authentication service.

    Sign-in, sign-out and token refresh notify subscribed listeners with
    ``signed_in``, ``signed_out`` and ``token_refreshed`` events.
    """

    @abstractmethod
    def get_session(self, access_token: str) -> Result[AuthSession | None]:
        """Resolve an access token; ``Ok(None)`` when unknown or expired."""
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Result[AuthSession]: ...

    @abstractmethod
    def sign_up(self, email: str, password: str, profile: SignUpProfile) -> Result[AuthSession]: ...

    @abstractmethod
    def sign_out(self, access_token: str) -> Result[None]: ...

    @abstractmethod
    def refresh_session(self, refresh_token: str) -> Result[AuthSession]: ...

    @abstractmethod
    def update_password(self, access_token: str, new_password: str) -> Result[None]: ...

    @abstractmethod
    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        ...
