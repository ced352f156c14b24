"""Tests for REST error response models."""

from carlot.entrypoints.http.error_responses import ERROR_RESPONSES, ErrorDetail, ErrorResponse


class TestErrorDetail:
    """Tests for ErrorDetail model."""

    def test_creates_error_detail_with_all_fields(self) -> None:
        detail = ErrorDetail(field="brand", message="Brand is required", code="REQUIRED")

        assert detail.field == "brand"
        assert detail.message == "Brand is required"
        assert detail.code == "REQUIRED"

    def test_serializes_to_dict_without_code(self) -> None:
        """ErrorDetail serializes without code field when None."""
        detail = ErrorDetail(field="client_email", message="Client email is required")

        assert detail.model_dump() == {
            "field": "client_email",
            "message": "Client email is required",
            "code": None,
        }


class TestErrorResponse:
    """Tests for ErrorResponse model."""

    def test_creates_simple_error_response(self) -> None:
        response = ErrorResponse(detail="Car not found", code="NOT_FOUND")

        assert response.detail == "Car not found"
        assert response.code == "NOT_FOUND"
        assert response.errors is None
        assert response.context is None

    def test_serializes_simple_error_to_dict(self) -> None:
        response = ErrorResponse(detail="Invalid or expired session", code="UNAUTHORIZED")

        assert response.model_dump() == {
            "detail": "Invalid or expired session",
            "code": "UNAUTHORIZED",
            "errors": None,
            "context": None,
        }

    def test_carries_partial_write_context(self) -> None:
        response = ErrorResponse(
            detail="Sale was recorded but the car could not be marked as sold",
            code="UPSTREAM_ERROR",
            context={"car_id": "c-1", "sale_id": "s-1", "step": "update_status"},
        )

        json_str = response.model_dump_json()

        assert '"sale_id":"s-1"' in json_str
        assert '"step":"update_status"' in json_str

    def test_parses_validation_error_from_dict(self) -> None:
        data = {
            "detail": "Validation failed",
            "code": "VALIDATION_ERROR",
            "errors": [{"field": "sale_price", "message": "Sale price must be > 0"}],
        }

        response = ErrorResponse.model_validate(data)

        assert response.errors is not None
        assert response.errors[0].field == "sale_price"
        assert response.errors[0].code is None


class TestErrorResponseExamples:
    """Tests for ErrorResponse example schemas."""

    def test_every_example_is_valid(self) -> None:
        schema = ErrorResponse.model_json_schema()

        assert len(schema["examples"]) >= 3
        for example in schema["examples"]:
            response = ErrorResponse.model_validate(example)
            assert response.detail
            assert response.code

    def test_upstream_example_names_failing_step(self) -> None:
        schema = ErrorResponse.model_json_schema()
        upstream = next(e for e in schema["examples"] if e["code"] == "UPSTREAM_ERROR")

        assert upstream["context"]["step"] == "upload_image"

    def test_error_detail_example_is_valid(self) -> None:
        schema = ErrorDetail.model_json_schema()

        detail = ErrorDetail.model_validate(schema["example"])

        assert detail.code == "REQUIRED"


def test_documented_responses_use_error_model() -> None:
    assert set(ERROR_RESPONSES) == {401, 422, 502}
    assert all(entry["model"] is ErrorResponse for entry in ERROR_RESPONSES.values())
