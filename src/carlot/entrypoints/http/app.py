from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from carlot.entrypoints.http.error_responses import ERROR_RESPONSES
from carlot.entrypoints.http.exception_handlers import register_exception_handlers
from carlot.entrypoints.http.routes.auth import router as auth_router
from carlot.entrypoints.http.routes.cars import router as cars_router
from carlot.entrypoints.http.routes.documents import router as documents_router
from carlot.entrypoints.http.routes.health import router as health_router
from carlot.entrypoints.http.routes.profile import router as profile_router
from carlot.entrypoints.http.routes.sales import router as sales_router
from carlot.entrypoints.http.routes.storage import router as storage_router
from carlot.infra.container import AppContainer
from carlot.infra.logging import configure_logging
from carlot.infra.settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    container: AppContainer = app.state.container
    container.startup()
    try:
        yield
    finally:
        container.shutdown()


def build_app(container: AppContainer | None = None) -> FastAPI:
    if container is None:
        container = AppContainer(settings=get_settings())
    configure_logging(container.settings.LOG_LEVEL)

    app = FastAPI(
        title="Carlot API",
        description="""
        Inventory API for used-car dealers.

        ## Features
        - Onboard cars in three steps (details, images, documents) with
          duplicate detection
        - Record sales with buyer details and documents
        - Dashboard stats and customer roster, also as a live stream
        - Signed URLs for stored documents

        ## Authentication
        Bearer access tokens from `/v1/auth/sign-in` or `/v1/auth/sign-up`.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        contact={"name": "Carlot Team", "email": "dev@carlot.app"},
        license_info={"name": "Proprietary"},
        lifespan=lifespan,
    )
    app.state.container = container

    register_exception_handlers(app)

    # unversioned: health check and raw object downloads
    app.include_router(health_router)
    app.include_router(storage_router)
    for router in (auth_router, profile_router, cars_router, sales_router, documents_router):
        app.include_router(router, prefix="/v1", responses=ERROR_RESPONSES)

    return app


app = build_app()
