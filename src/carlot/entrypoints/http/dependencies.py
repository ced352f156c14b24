"""
Dependency injection for FastAPI routes.

Key principle: Database sessions and vendor sessions are per-request, not
cached. Process-wide collaborators (change feed, object storage, auth event
registry) live on the ``AppContainer`` stored in ``app.state``.
"""

from __future__ import annotations

from typing import Generator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from carlot.adapters.postgres_auth_service import PostgresAuthService
from carlot.adapters.postgres_car_asset_repository import PostgresCarAssetRepository
from carlot.adapters.postgres_car_repository import PostgresCarRepository
from carlot.adapters.postgres_sale_repository import PostgresSaleRepository
from carlot.adapters.postgres_vendor_repository import PostgresVendorRepository
from carlot.domain.errors import UnauthorizedError
from carlot.domain.stats import ProfileStats
from carlot.domain.vendor import Vendor
from carlot.infra.container import AppContainer
from carlot.infra.db.session import get_session
from carlot.ports.auth_service import AuthService
from carlot.ports.car_asset_repository import CarAssetRepository
from carlot.ports.car_repository import CarRepository
from carlot.ports.object_storage import ObjectStorage
from carlot.ports.sale_repository import SaleRepository
from carlot.ports.vendor_repository import VendorRepository
from carlot.use_cases.auth_flows import ChangePassword, RefreshSession, SignIn, SignOut, SignUp
from carlot.use_cases.check_duplicate_car import CheckDuplicateCar
from carlot.use_cases.delete_car import DeleteCar
from carlot.use_cases.get_car_details import GetCarDetails
from carlot.use_cases.list_vendor_cars import ListVendorCars
from carlot.use_cases.onboard_car import SubmitCarOnboarding
from carlot.use_cases.profile_stats import LoadProfileStats, WatchProfileStats
from carlot.use_cases.record_sale import RecordSale
from carlot.use_cases.resolve_document_url import ResolveDocumentUrl
from carlot.use_cases.update_vendor_profile import UpdateVendorProfile
from carlot.use_cases.vendor_session import VendorSession

_bearer = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Provides a database session for a single request.

    The underlying get_session() is a context manager that handles:
    - Session creation
    - Auto-commit on success
    - Auto-rollback on exception
    - Session cleanup

    Repositories commit each write themselves, so a workflow that fails
    halfway keeps the writes made before the failing step.

    Yields:
        Session: SQLAlchemy database session (per-request)
    """
    with get_session() as session:
        yield session


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_storage(container: AppContainer = Depends(get_container)) -> ObjectStorage:
    return container.storage


# ==============================================================================
# Repositories and services (per-request)
# ==============================================================================


def get_car_repository(
    db: Session = Depends(get_db), container: AppContainer = Depends(get_container)
) -> CarRepository:
    return PostgresCarRepository(session=db, change_feed=container.change_feed)


def get_car_asset_repository(
    db: Session = Depends(get_db), container: AppContainer = Depends(get_container)
) -> CarAssetRepository:
    return PostgresCarAssetRepository(session=db, change_feed=container.change_feed)


def get_sale_repository(
    db: Session = Depends(get_db), container: AppContainer = Depends(get_container)
) -> SaleRepository:
    return PostgresSaleRepository(session=db, change_feed=container.change_feed)


def get_vendor_repository(
    db: Session = Depends(get_db), container: AppContainer = Depends(get_container)
) -> VendorRepository:
    return PostgresVendorRepository(session=db, change_feed=container.change_feed)


def get_auth_service(
    db: Session = Depends(get_db), container: AppContainer = Depends(get_container)
) -> AuthService:
    settings = container.settings
    return PostgresAuthService(
        session=db,
        listeners=container.auth_listeners,
        access_ttl_seconds=settings.ACCESS_TOKEN_TTL_SECONDS,
        refresh_ttl_seconds=settings.REFRESH_TOKEN_TTL_SECONDS,
        hash_iterations=settings.PASSWORD_HASH_ITERATIONS,
    )


# ==============================================================================
# Authentication
# ==============================================================================


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Bearer token from the ``Authorization`` header."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("You must be logged in")
    return credentials.credentials


def get_vendor_session(
    access_token: str = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service),
    vendor_repository: VendorRepository = Depends(get_vendor_repository),
) -> Generator[VendorSession, None, None]:
    """
    Opens a VendorSession for the request's bearer token.

    The session listens for auth events while the request runs and is
    closed when the request ends.
    """
    session = VendorSession(auth_service=auth_service, vendor_repository=vendor_repository)
    session.open(access_token)
    try:
        yield session
    finally:
        session.close()


def get_current_vendor(session: VendorSession = Depends(get_vendor_session)) -> Vendor:
    return session.require_vendor()


# ==============================================================================
# Use cases
# ==============================================================================


def get_sign_up_use_case(auth_service: AuthService = Depends(get_auth_service)) -> SignUp:
    return SignUp(auth_service)


def get_sign_in_use_case(auth_service: AuthService = Depends(get_auth_service)) -> SignIn:
    return SignIn(auth_service)


def get_sign_out_use_case(auth_service: AuthService = Depends(get_auth_service)) -> SignOut:
    return SignOut(auth_service)


def get_refresh_session_use_case(
    auth_service: AuthService = Depends(get_auth_service),
) -> RefreshSession:
    return RefreshSession(auth_service)


def get_change_password_use_case(
    session: VendorSession = Depends(get_vendor_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> ChangePassword:
    return ChangePassword(session=session, auth_service=auth_service)


def get_update_profile_use_case(
    session: VendorSession = Depends(get_vendor_session),
    vendor_repository: VendorRepository = Depends(get_vendor_repository),
    storage: ObjectStorage = Depends(get_storage),
) -> UpdateVendorProfile:
    return UpdateVendorProfile(session=session, vendor_repository=vendor_repository, storage=storage)


def get_load_profile_stats_use_case(
    car_repository: CarRepository = Depends(get_car_repository),
    sale_repository: SaleRepository = Depends(get_sale_repository),
) -> LoadProfileStats:
    return LoadProfileStats(car_repository=car_repository, sale_repository=sale_repository)


def get_watch_profile_stats_use_case(
    container: AppContainer = Depends(get_container),
) -> WatchProfileStats:
    """
    Stats stream whose every reload opens its own database session.

    A stream outlives the request-scoped session, so it cannot share it.
    """

    def load_stats(vendor_id: str) -> ProfileStats:
        with get_session() as db:
            loader = LoadProfileStats(
                car_repository=PostgresCarRepository(session=db),
                sale_repository=PostgresSaleRepository(session=db),
            )
            return loader.execute(vendor_id)

    return WatchProfileStats(
        load_stats=load_stats,
        change_feed=container.change_feed,
        keepalive_seconds=container.settings.STATS_STREAM_KEEPALIVE_SECONDS,
    )


def get_list_cars_use_case(
    car_repository: CarRepository = Depends(get_car_repository),
    asset_repository: CarAssetRepository = Depends(get_car_asset_repository),
) -> ListVendorCars:
    return ListVendorCars(car_repository=car_repository, asset_repository=asset_repository)


def get_car_details_use_case(
    car_repository: CarRepository = Depends(get_car_repository),
    asset_repository: CarAssetRepository = Depends(get_car_asset_repository),
    sale_repository: SaleRepository = Depends(get_sale_repository),
) -> GetCarDetails:
    return GetCarDetails(
        car_repository=car_repository,
        asset_repository=asset_repository,
        sale_repository=sale_repository,
    )


def get_check_duplicate_use_case(
    car_repository: CarRepository = Depends(get_car_repository),
) -> CheckDuplicateCar:
    return CheckDuplicateCar(car_repository)


def get_submit_onboarding_use_case(
    session: VendorSession = Depends(get_vendor_session),
    car_repository: CarRepository = Depends(get_car_repository),
    asset_repository: CarAssetRepository = Depends(get_car_asset_repository),
    storage: ObjectStorage = Depends(get_storage),
) -> SubmitCarOnboarding:
    return SubmitCarOnboarding(
        session=session,
        car_repository=car_repository,
        asset_repository=asset_repository,
        storage=storage,
    )


def get_delete_car_use_case(
    car_repository: CarRepository = Depends(get_car_repository),
    asset_repository: CarAssetRepository = Depends(get_car_asset_repository),
    sale_repository: SaleRepository = Depends(get_sale_repository),
    storage: ObjectStorage = Depends(get_storage),
) -> DeleteCar:
    return DeleteCar(
        car_repository=car_repository,
        asset_repository=asset_repository,
        sale_repository=sale_repository,
        storage=storage,
    )


def get_record_sale_use_case(
    session: VendorSession = Depends(get_vendor_session),
    car_repository: CarRepository = Depends(get_car_repository),
    sale_repository: SaleRepository = Depends(get_sale_repository),
    storage: ObjectStorage = Depends(get_storage),
) -> RecordSale:
    return RecordSale(
        session=session,
        car_repository=car_repository,
        sale_repository=sale_repository,
        storage=storage,
    )


def get_resolve_document_use_case(
    container: AppContainer = Depends(get_container),
) -> ResolveDocumentUrl:
    return ResolveDocumentUrl(
        storage=container.storage,
        ttl_seconds=container.settings.SIGNED_URL_TTL_SECONDS,
    )
