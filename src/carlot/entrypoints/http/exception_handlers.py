"""Translation of carlot errors into JSON error bodies.

Every body has ``detail`` and ``code``; field errors add ``errors`` and
workflow errors add ``context`` (car/sale ids, failing step, existing car).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from carlot.domain.errors import DomainError

logger = logging.getLogger(__name__)

# HTTP_422_UNPROCESSABLE_ENTITY was renamed in recent Starlette releases
UNPROCESSABLE = 422

STATUS_BY_CODE: dict[str, int] = {
    "VALIDATION_ERROR": UNPROCESSABLE,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "DUPLICATE_CAR": status.HTTP_409_CONFLICT,
    "CAR_ALREADY_SOLD": status.HTTP_409_CONFLICT,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "UPSTREAM_ERROR": status.HTTP_502_BAD_GATEWAY,
    "DUPLICATE_CHECK_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# location segments FastAPI puts in front of the field name
_LOCATION_PREFIXES = frozenset({"body", "query", "form"})


def _where(request: Request) -> dict[str, str]:
    return {"path": request.url.path, "method": request.method}


def _error_body(detail: str, code: str, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"detail": detail, "code": code}
    body.update({key: value for key, value in extra.items() if value})
    return body


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Status comes from ``STATUS_BY_CODE``; unknown codes are a 400.

    5xx errors are logged at ERROR with their context, client errors at INFO.
    """
    status_code = STATUS_BY_CODE.get(exc.error_code, status.HTTP_400_BAD_REQUEST)

    if status_code >= 500:
        logger.error(
            "Workflow failed",
            extra={"error_code": exc.error_code, "error": exc.message, "context": exc.context, **_where(request)},
        )
    else:
        logger.info(
            "Request rejected",
            extra={"error_code": exc.error_code, "error": exc.message, **_where(request)},
        )

    errors = getattr(exc, "errors", None)
    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.message, exc.error_code, errors=errors, context=jsonable_encoder(exc.context)),
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed query, form or JSON input (a ``status=leased`` filter, a missing
    ``client_name`` form field), reported with one entry per field."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in _LOCATION_PREFIXES),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]

    logger.info("Request validation failed", extra={"errors": errors, **_where(request)})

    return JSONResponse(
        status_code=UNPROCESSABLE,
        content=_error_body("Invalid request parameters", "VALIDATION_ERROR", errors=errors),
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    # mappers raise ValueError for prices, dates and payment methods they cannot parse
    logger.info("Unparseable value", extra={"error": str(exc), **_where(request)})

    return JSONResponse(status_code=UNPROCESSABLE, content=_error_body(str(exc), "INVALID_VALUE"))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={"error_type": type(exc).__name__, "error": str(exc), **_where(request)},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, handle_value_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.info("Exception handlers registered")
