"""Session state for the signed-in vendor."""

from __future__ import annotations

import logging
from typing import Callable

from carlot.domain.auth import AuthEvent, AuthEventType, AuthSession, AuthUser
from carlot.domain.errors import UnauthorizedError, UpstreamError
from carlot.domain.result import Err
from carlot.domain.vendor import Vendor
from carlot.ports.auth_service import AuthService
from carlot.ports.vendor_repository import VendorRepository

logger = logging.getLogger(__name__)


class VendorSession:
    """
    Holds the authenticated vendor for the lifetime of one client session.

    Workflows receive the session at construction instead of reaching for
    global state. Lifecycle:

    - ``open(access_token)`` resolves the auth session, loads the vendor
      profile (creating it from the sign-up metadata if it is missing) and
      starts listening for auth events
    - ``handle_auth_event`` reloads the vendor on ``signed_in`` and
      ``token_refreshed`` and clears it on ``signed_out``
    - ``close()`` stops listening and forgets the vendor
    """

    def __init__(self, auth_service: AuthService, vendor_repository: VendorRepository) -> None:
        self._auth = auth_service
        self._vendors = vendor_repository
        self._auth_session: AuthSession | None = None
        self._vendor: Vendor | None = None
        self._unsubscribe: Callable[[], None] | None = None

    def open(self, access_token: str) -> Vendor:
        """
        Resolve ``access_token`` to a vendor.

        Raises:
            UnauthorizedError: If the token is unknown or expired
            UpstreamError: If the auth service or vendor store failed
        """
        result = self._auth.get_session(access_token)
        if isinstance(result, Err):
            logger.error("Error getting session", extra={"error": result.message})
            raise UpstreamError("Could not verify session")
        if result.value is None:
            raise UnauthorizedError("Invalid or expired session")

        self._auth_session = result.value
        self._vendor = self._load_vendor(result.value.user)
        if self._unsubscribe is None:
            self._unsubscribe = self._auth.subscribe(self.handle_auth_event)
        return self._vendor

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._auth_session = None
        self._vendor = None

    def handle_auth_event(self, event: AuthEvent) -> None:
        if self._auth_session is None or event.subject != self._auth_session.user.id:
            return
        if event.type is AuthEventType.SIGNED_OUT:
            self._auth_session = None
            self._vendor = None
        elif event.session is not None:
            # signed_in / token_refreshed
            self._auth_session = event.session
            self._vendor = self._load_vendor(event.session.user)

    @property
    def vendor(self) -> Vendor | None:
        return self._vendor

    @property
    def access_token(self) -> str | None:
        return self._auth_session.access_token if self._auth_session else None

    @property
    def is_open(self) -> bool:
        return self._vendor is not None

    def require_vendor(self) -> Vendor:
        if self._vendor is None:
            raise UnauthorizedError("You must be logged in")
        return self._vendor

    def replace_vendor(self, vendor: Vendor) -> None:
        """Swap in a freshly updated profile of the same vendor."""
        if self._vendor is not None and vendor.id == self._vendor.id:
            self._vendor = vendor

    def __enter__(self) -> VendorSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _load_vendor(self, user: AuthUser) -> Vendor:
        result = self._vendors.get(user.id)
        if isinstance(result, Err):
            raise UpstreamError("Could not load vendor profile", vendor_id=user.id)
        if result.value is not None:
            return result.value

        logger.info("Creating missing vendor profile", extra={"vendor_id": user.id})
        created = self._vendors.add(
            Vendor(
                id=user.id,
                email=user.email,
                full_name=user.user_metadata.get("full_name") or "",
                phone=user.user_metadata.get("phone") or None,
            )
        )
        if isinstance(created, Err):
            raise UpstreamError("Could not create vendor profile", vendor_id=user.id)
        return created.value
