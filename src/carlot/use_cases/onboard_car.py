"""Car onboarding: the three-step wizard and its submission."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, NoReturn

from carlot.domain.car import Car, CarDetails, CarDocument, CarImage, CarStatus, StagedFile
from carlot.domain.errors import (
    DomainError,
    DuplicateCarError,
    DuplicateCheckUnavailableError,
    InvalidStepError,
    UpstreamError,
    ValidationError,
)
from carlot.domain.filenames import CAR_DOCUMENTS_BUCKET, CAR_IMAGES_BUCKET, asset_key
from carlot.domain.result import Err
from carlot.ports.car_asset_repository import CarAssetRepository
from carlot.ports.car_repository import CarRepository
from carlot.ports.object_storage import ObjectStorage
from carlot.use_cases.check_duplicate_car import (
    CheckDuplicateCar,
    DuplicateCheckFailed,
    DuplicateFound,
)
from carlot.use_cases.vendor_session import VendorSession

logger = logging.getLogger(__name__)

IMAGES_REQUIRED_MESSAGE = "At least one car image is required"


class OnboardingStep(str, Enum):
    DETAILS = "details"
    IMAGES = "images"
    DOCUMENTS = "documents"


def validate_images(images: list[StagedFile]) -> None:
    if not images:
        raise ValidationError(
            IMAGES_REQUIRED_MESSAGE,
            errors=[{"field": "images", "message": IMAGES_REQUIRED_MESSAGE, "code": "REQUIRED"}],
        )


def validate_step(step: OnboardingStep, details: CarDetails, images: list[StagedFile]) -> OnboardingStep:
    """
    Check that ``step`` is complete and return the step that follows it.

    Raises:
        ValidationError: If the step is incomplete
        InvalidStepError: For the documents step, which is submitted instead
    """
    if step is OnboardingStep.DETAILS:
        details.validate()
        return OnboardingStep.IMAGES
    if step is OnboardingStep.IMAGES:
        validate_images(images)
        return OnboardingStep.DOCUMENTS
    raise InvalidStepError("Documents is the last step; submit instead", step=step.value)


@dataclass(frozen=True, slots=True)
class OnboardCarRequest:
    details: CarDetails
    images: list[StagedFile]
    documents: list[StagedFile] = field(default_factory=list)
    primary_image_index: int = 0


@dataclass(frozen=True, slots=True)
class OnboardedCar:
    car: Car
    images: list[CarImage]
    documents: list[CarDocument]


class SubmitCarOnboarding:
    """
    Create a car with its images and documents.

    Sequence:
    1. duplicate gate (nothing is written when it blocks)
    2. insert the car, status forced to available
    3. upload each image and insert its row; only ``primary_image_index``
       is flagged primary
    4. upload each document and insert its row

    Uploads run one at a time in list order. A failure after step 2 halts
    the workflow with ``UpstreamError`` and leaves the car and any assets
    written so far in place.
    """

    def __init__(
        self,
        session: VendorSession,
        car_repository: CarRepository,
        asset_repository: CarAssetRepository,
        storage: ObjectStorage,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._session = session
        self._cars = car_repository
        self._assets = asset_repository
        self._storage = storage
        self._duplicates = CheckDuplicateCar(car_repository)
        self._clock = clock

    def execute(self, request: OnboardCarRequest) -> OnboardedCar:
        """
        Execute the onboarding submission.

        Raises:
            UnauthorizedError: If no vendor is signed in
            ValidationError: If details are incomplete, no image is staged
                or the primary index is out of range
            DuplicateCarError: If the car duplicates an existing one
            DuplicateCheckUnavailableError: If the duplicate lookup failed
            UpstreamError: If a store or storage call failed
        """
        vendor = self._session.require_vendor()
        details = request.details.normalized()
        details.validate()
        validate_images(request.images)
        if not 0 <= request.primary_image_index < len(request.images):
            raise ValidationError(
                errors=[
                    {
                        "field": "primary_image_index",
                        "message": "Must point at one of the staged images",
                        "code": "OUT_OF_RANGE",
                    }
                ]
            )

        outcome = self._duplicates.execute(vendor.id, details)
        if isinstance(outcome, DuplicateFound):
            raise DuplicateCarError(outcome.description, existing_car_id=outcome.car_id)
        if isinstance(outcome, DuplicateCheckFailed):
            raise DuplicateCheckUnavailableError(outcome.message)

        inserted = self._cars.add(vendor.id, details, CarStatus.AVAILABLE)
        if isinstance(inserted, Err):
            logger.error("Car insert failed", extra={"vendor_id": vendor.id, "error": inserted.message})
            raise UpstreamError("Failed to add car", step="insert_car")
        car = inserted.value

        images: list[CarImage] = []
        for index, staged in enumerate(request.images):
            url = self._upload(CAR_IMAGES_BUCKET, vendor.id, car, staged, "upload_image", index)
            added_image = self._assets.add_image(
                car.id, url, is_primary=index == request.primary_image_index
            )
            if isinstance(added_image, Err):
                self._halt(car, "insert_image", index, added_image)
            images.append(added_image.value)

        documents: list[CarDocument] = []
        for index, staged in enumerate(request.documents):
            url = self._upload(CAR_DOCUMENTS_BUCKET, vendor.id, car, staged, "upload_document", index)
            added_document = self._assets.add_document(
                car.id,
                document_name=staged.filename,
                document_url=url,
                document_type=staged.content_type,
            )
            if isinstance(added_document, Err):
                self._halt(car, "insert_document", index, added_document)
            documents.append(added_document.value)

        logger.info(
            "Car onboarded",
            extra={
                "vendor_id": vendor.id,
                "car_id": car.id,
                "images": len(images),
                "documents": len(documents),
            },
        )
        return OnboardedCar(car=car, images=images, documents=documents)

    def _upload(
        self,
        bucket: str,
        vendor_id: str,
        car: Car,
        staged: StagedFile,
        step: str,
        index: int,
    ) -> str:
        key = asset_key(vendor_id, car.id, staged.filename, now=self._clock())
        uploaded = self._storage.upload(bucket, key, staged.content, staged.content_type)
        if isinstance(uploaded, Err):
            self._halt(car, step, index, uploaded)
        return self._storage.get_public_url(bucket, key)

    def _halt(self, car: Car, step: str, index: int, err: Err) -> NoReturn:
        logger.error(
            "Onboarding halted, car left without all assets",
            exc_info=err.cause,
            extra={"car_id": car.id, "step": step, "index": index, "error": err.message},
        )
        raise UpstreamError(
            f"Failed to save car assets: {err.message}",
            car_id=car.id,
            step=step,
            index=index,
        )


class OnboardingWizard:
    """
    Three-step onboarding flow: details -> images -> documents.

    ``next()`` validates the step being left; ``back()`` never validates.
    ``submit()`` is only legal on the documents step. A successful submit
    resets the wizard to its initial state and calls ``on_submitted``.
    The last error message raised by a step is kept in ``error``.
    """

    _ORDER = (OnboardingStep.DETAILS, OnboardingStep.IMAGES, OnboardingStep.DOCUMENTS)

    def __init__(
        self,
        submitter: SubmitCarOnboarding,
        on_submitted: Callable[[OnboardedCar], None] | None = None,
    ) -> None:
        self._submitter = submitter
        self._on_submitted = on_submitted
        self.reset()

    def reset(self) -> None:
        self.step = OnboardingStep.DETAILS
        self.details = CarDetails()
        self.images: list[StagedFile] = []
        self.documents: list[StagedFile] = []
        self.primary_image_index = 0
        self.error: str | None = None

    def update_details(self, **changes: Any) -> CarDetails:
        self.details = replace(self.details, **changes)
        return self.details

    def add_images(self, files: list[StagedFile]) -> None:
        self.images.extend(files)

    def remove_image(self, index: int) -> None:
        del self.images[index]
        if self.primary_image_index == index:
            self.primary_image_index = 0
        elif self.primary_image_index > index:
            self.primary_image_index -= 1

    def set_primary_image(self, index: int) -> None:
        if not 0 <= index < len(self.images):
            raise IndexError(f"No staged image at index {index}")
        self.primary_image_index = index

    def add_documents(self, files: list[StagedFile]) -> None:
        self.documents.extend(files)

    def remove_document(self, index: int) -> None:
        del self.documents[index]

    def next(self) -> OnboardingStep:
        """
        Advance one step.

        Raises:
            ValidationError: If the current step is incomplete
            InvalidStepError: On the documents step (use ``submit()``)
        """
        try:
            following = validate_step(self.step, self.details, self.images)
        except ValidationError as exc:
            self.error = exc.message
            raise
        self.error = None
        self.step = following
        return self.step

    def back(self) -> OnboardingStep:
        position = self._ORDER.index(self.step)
        if position > 0:
            self.step = self._ORDER[position - 1]
        return self.step

    def submit(self) -> OnboardedCar:
        if self.step is not OnboardingStep.DOCUMENTS:
            raise InvalidStepError(
                "Car can only be submitted from the documents step",
                step=self.step.value,
            )
        self.error = None
        try:
            onboarded = self._submitter.execute(
                OnboardCarRequest(
                    details=self.details,
                    images=list(self.images),
                    documents=list(self.documents),
                    primary_image_index=self.primary_image_index,
                )
            )
        except DomainError as exc:
            self.error = exc.message
            raise
        self.reset()
        if self._on_submitted is not None:
            self._on_submitted(onboarded)
        return onboarded
