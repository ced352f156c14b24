from collections.abc import Iterator

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from carlot.domain.stats import ProfileStats
from carlot.domain.vendor import Vendor, VendorProfileUpdate
from carlot.entrypoints.http.dependencies import (
    get_change_password_use_case,
    get_current_vendor,
    get_load_profile_stats_use_case,
    get_update_profile_use_case,
    get_watch_profile_stats_use_case,
)
from carlot.entrypoints.http.dtos.profile import (
    ChangePasswordRequestDTO,
    ProfileStatsResponseDTO,
    VendorResponseDTO,
)
from carlot.entrypoints.http.mappers.profile_mapper import ProfileMapper
from carlot.entrypoints.http.mappers.upload_mapper import UploadMapper
from carlot.use_cases.auth_flows import ChangePassword, ChangePasswordRequest
from carlot.use_cases.profile_stats import LoadProfileStats, WatchProfileStats
from carlot.use_cases.update_vendor_profile import UpdateVendorProfile, UpdateVendorProfileRequest


router = APIRouter(prefix="/profile", tags=["Profile"])


def format_stats_event(stats: ProfileStats | None) -> str:
    """One server-sent event: a stats snapshot, or a comment line as keepalive."""
    if stats is None:
        return ": keepalive\n\n"
    payload = ProfileMapper.to_stats_response(stats).model_dump_json()
    return f"event: stats\ndata: {payload}\n\n"


@router.get("", response_model=VendorResponseDTO, summary="Current vendor profile")
def get_profile(vendor: Vendor = Depends(get_current_vendor)) -> VendorResponseDTO:
    return ProfileMapper.to_vendor_response(vendor)


@router.patch(
    "",
    response_model=VendorResponseDTO,
    summary="Update the vendor profile",
    description="""
    Multipart form. `full_name` is optional but may not be blank; `phone`
    is always written, so leaving it out clears it. An optional `photo`
    is stored as the new profile photo.
    """,
)
def update_profile(
    full_name: str | None = Form(default=None),
    phone: str | None = Form(default=None),
    photo: UploadFile | None = File(default=None),
    use_case: UpdateVendorProfile = Depends(get_update_profile_use_case),
) -> VendorResponseDTO:
    staged = UploadMapper.to_staged(photo) if photo is not None and photo.filename else None
    vendor = use_case.execute(
        UpdateVendorProfileRequest(
            update=VendorProfileUpdate(full_name=full_name, phone=phone),
            photo=staged,
        )
    )
    return ProfileMapper.to_vendor_response(vendor)


@router.post(
    "/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change password",
    description="""
    The new password must be at least 6 characters and match
    `confirm_password`. A wrong `current_password` answers 422 with
    "Current password is incorrect".
    """,
)
def change_password(
    payload: ChangePasswordRequestDTO,
    use_case: ChangePassword = Depends(get_change_password_use_case),
) -> Response:
    use_case.execute(
        ChangePasswordRequest(
            current_password=payload.current_password,
            new_password=payload.new_password,
            confirm_password=payload.confirm_password,
        )
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/stats",
    response_model=ProfileStatsResponseDTO,
    summary="Dashboard stats and customer roster",
)
def get_stats(
    vendor: Vendor = Depends(get_current_vendor),
    use_case: LoadProfileStats = Depends(get_load_profile_stats_use_case),
) -> ProfileStatsResponseDTO:
    return ProfileMapper.to_stats_response(use_case.execute(vendor.id))


@router.get(
    "/stats/stream",
    summary="Live stats",
    description="""
    Server-sent events. The first `stats` event carries the current
    snapshot; another follows every change to the vendor's cars or sales.
    Comment lines are sent as keepalive while nothing changes.
    """,
    response_class=StreamingResponse,
)
def stream_stats(
    vendor: Vendor = Depends(get_current_vendor),
    use_case: WatchProfileStats = Depends(get_watch_profile_stats_use_case),
) -> StreamingResponse:
    vendor_id = vendor.id

    def events() -> Iterator[str]:
        for stats in use_case.stream(vendor_id):
            yield format_stats_event(stats)

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
