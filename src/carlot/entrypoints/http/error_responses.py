"""OpenAPI models for the error bodies built in ``exception_handlers``."""

from typing import Any

from pydantic import BaseModel, ConfigDict

_BRAND_REQUIRED = {"field": "brand", "message": "Brand is required", "code": "REQUIRED"}


class ErrorDetail(BaseModel):
    """One offending form field."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(json_schema_extra={"example": _BRAND_REQUIRED})


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response.

    ``errors`` is set for field validation failures. ``context`` is set when
    the error refers to stored records, e.g. the ``existing_car_id`` of a
    duplicate, or the ``car_id`` and ``step`` of an onboarding that stopped
    half way.
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None
    context: dict[str, Any] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Invalid or expired session", "code": "UNAUTHORIZED"},
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {"field": "client_name", "message": "Client name is required"},
                        {"field": "sale_price", "message": "Sale price must be > 0"},
                    ],
                },
                {
                    "detail": 'A car with registration number "MH12AB1234" already exists (Honda City 2020)',
                    "code": "DUPLICATE_CAR",
                    "context": {"existing_car_id": "2b0c..."},
                },
                {
                    "detail": "Failed to save car assets: Upload to car-images failed",
                    "code": "UPSTREAM_ERROR",
                    "context": {"car_id": "2b0c...", "step": "upload_image", "index": 1},
                },
            ]
        }
    )


# attached to every /v1 router
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing or invalid access token"},
    422: {"model": ErrorResponse, "description": "Invalid input"},
    502: {"model": ErrorResponse, "description": "Store, storage or auth service failed"},
}
