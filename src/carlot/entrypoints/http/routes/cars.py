from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from carlot.domain.car import CarStatus
from carlot.domain.errors import DuplicateCheckUnavailableError
from carlot.domain.vendor import Vendor
from carlot.entrypoints.http.dependencies import (
    get_car_details_use_case,
    get_check_duplicate_use_case,
    get_current_vendor,
    get_delete_car_use_case,
    get_list_cars_use_case,
    get_submit_onboarding_use_case,
)
from carlot.entrypoints.http.dtos.cars import (
    CarDetailsDTO,
    CarDetailsResponseDTO,
    CarListResponseDTO,
    DuplicateCheckResponseDTO,
    OnboardedCarResponseDTO,
    StepValidationResponseDTO,
)
from carlot.entrypoints.http.mappers.car_mapper import CarMapper
from carlot.entrypoints.http.mappers.upload_mapper import UploadMapper
from carlot.use_cases.check_duplicate_car import CheckDuplicateCar, DuplicateCheckFailed
from carlot.use_cases.delete_car import DeleteCar
from carlot.use_cases.get_car_details import GetCarDetails
from carlot.use_cases.list_vendor_cars import ListVendorCars, ListVendorCarsRequest
from carlot.use_cases.onboard_car import (
    OnboardCarRequest,
    OnboardingStep,
    SubmitCarOnboarding,
    validate_step,
)


router = APIRouter(prefix="/cars", tags=["Cars"])


def car_details_form(
    brand: str = Form(default=""),
    model: str = Form(default=""),
    year: int | None = Form(default=None, ge=1900),
    color: str = Form(default=""),
    fuel_type: str = Form(default=""),
    transmission: str = Form(default=""),
    mileage: int | None = Form(default=None, ge=0),
    price: str | None = Form(default=None, pattern=r"^\d+(\.\d{1,2})?$"),
    description: str | None = Form(default=None),
    engine_capacity: str | None = Form(default=None),
    body_type: str | None = Form(default=None),
    condition: str | None = Form(default=None),
    registration_number: str | None = Form(default=None),
    chassis_number: str | None = Form(default=None),
    engine_number: str | None = Form(default=None),
) -> CarDetailsDTO:
    """Details fields of the multipart onboarding form."""
    return CarDetailsDTO(
        brand=brand,
        model=model,
        year=year,
        color=color,
        fuel_type=fuel_type,
        transmission=transmission,
        mileage=mileage,
        price=price or None,
        description=description,
        engine_capacity=engine_capacity,
        body_type=body_type,
        condition=condition,
        registration_number=registration_number,
        chassis_number=chassis_number,
        engine_number=engine_number,
    )


@router.get(
    "",
    response_model=CarListResponseDTO,
    summary="List the vendor's cars",
    description="""
    Newest first, each car with its images.

    ## Filters
    - `search`: case-insensitive substring of brand, model or color, or the year
    - `status`: `available` or `sold`
    """,
)
def list_cars(
    search: str | None = Query(default=None, examples=["honda"]),
    car_status: CarStatus | None = Query(default=None, alias="status"),
    vendor: Vendor = Depends(get_current_vendor),
    use_case: ListVendorCars = Depends(get_list_cars_use_case),
) -> CarListResponseDTO:
    items = use_case.execute(
        ListVendorCarsRequest(vendor_id=vendor.id, search=search, status=car_status)
    )
    return CarMapper.to_list_response(items)


@router.post(
    "/validate",
    response_model=StepValidationResponseDTO,
    dependencies=[Depends(get_current_vendor)],
    summary="Validate one onboarding step",
    description="""
    Checks the step named by `step` using the same multipart form as the
    submission. `details` requires every required field, `images` requires
    at least one image. The documents step is not validated; it is submitted.
    """,
)
def validate_onboarding_step(
    step: OnboardingStep = Query(),
    details: CarDetailsDTO = Depends(car_details_form),
    images: list[UploadFile] | None = File(default=None),
) -> StepValidationResponseDTO:
    following = validate_step(
        step,
        CarMapper.to_domain_details(details),
        UploadMapper.to_staged_list(images),
    )
    return StepValidationResponseDTO(step=step.value, next_step=following.value)


@router.post(
    "/duplicates",
    response_model=DuplicateCheckResponseDTO,
    summary="Check a car for duplicates",
    description="""
    Looks for an existing car of the vendor with the same registration,
    chassis or engine number, in that order. Only when none of the three
    is given, an exact match on brand, model, year, color, mileage and
    price counts as a duplicate.

    A failed lookup answers 503; it never reads as "no duplicate".
    """,
)
def check_duplicates(
    payload: CarDetailsDTO,
    vendor: Vendor = Depends(get_current_vendor),
    use_case: CheckDuplicateCar = Depends(get_check_duplicate_use_case),
) -> DuplicateCheckResponseDTO:
    outcome = use_case.execute(vendor.id, CarMapper.to_domain_details(payload))
    if isinstance(outcome, DuplicateCheckFailed):
        raise DuplicateCheckUnavailableError(outcome.message)
    return CarMapper.to_duplicate_response(outcome)


@router.post(
    "",
    response_model=OnboardedCarResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Onboard a car",
    description="""
    Multipart form with the car details, one or more `images`, optional
    `documents` and `primary_image_index` (default 0).

    Blocked with 409 when the car duplicates an existing one, and with 503
    when the duplicate check could not run. Images and documents are
    uploaded one at a time; a failure stops the submission with 502 and
    leaves the car and the assets saved so far in place (the response
    context names the car id and the failing step).
    """,
)
def onboard_car(
    details: CarDetailsDTO = Depends(car_details_form),
    images: list[UploadFile] | None = File(default=None),
    documents: list[UploadFile] | None = File(default=None),
    primary_image_index: int = Form(default=0),
    use_case: SubmitCarOnboarding = Depends(get_submit_onboarding_use_case),
) -> OnboardedCarResponseDTO:
    onboarded = use_case.execute(
        OnboardCarRequest(
            details=CarMapper.to_domain_details(details),
            images=UploadMapper.to_staged_list(images),
            documents=UploadMapper.to_staged_list(documents),
            primary_image_index=primary_image_index,
        )
    )
    return CarMapper.to_onboarded_response(onboarded)


@router.get(
    "/{car_id}",
    response_model=CarDetailsResponseDTO,
    summary="Get car details",
    responses={404: {"description": "Car not found"}},
)
def get_car(
    car_id: str,
    vendor: Vendor = Depends(get_current_vendor),
    use_case: GetCarDetails = Depends(get_car_details_use_case),
) -> CarDetailsResponseDTO:
    return CarMapper.to_details_response(use_case.execute(vendor.id, car_id))


@router.delete(
    "/{car_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a car",
    description="""
    Removes the car's stored files (best effort), then its images,
    documents and sales, then the car itself.
    """,
)
def delete_car(
    car_id: str,
    vendor: Vendor = Depends(get_current_vendor),
    use_case: DeleteCar = Depends(get_delete_car_use_case),
) -> Response:
    use_case.execute(vendor.id, car_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
