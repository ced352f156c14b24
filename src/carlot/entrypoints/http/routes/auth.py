from fastapi import APIRouter, Depends, Response, status

from carlot.entrypoints.http.dependencies import (
    get_access_token,
    get_refresh_session_use_case,
    get_sign_in_use_case,
    get_sign_out_use_case,
    get_sign_up_use_case,
)
from carlot.entrypoints.http.dtos.auth import (
    RefreshRequestDTO,
    SessionResponseDTO,
    SignInRequestDTO,
    SignUpRequestDTO,
)
from carlot.entrypoints.http.mappers.profile_mapper import ProfileMapper
from carlot.use_cases.auth_flows import RefreshSession, SignIn, SignOut, SignUp, SignUpRequest


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/sign-up",
    response_model=SessionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Register a vendor account",
    description="""
    Create an account and sign in.

    The vendor profile is created from `full_name` and `phone` the first
    time the returned access token is used.

    Passwords must be at least 6 characters. An email that is already
    registered answers 409.
    """,
)
def sign_up(
    payload: SignUpRequestDTO,
    use_case: SignUp = Depends(get_sign_up_use_case),
) -> SessionResponseDTO:
    session = use_case.execute(
        SignUpRequest(
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
            phone=payload.phone,
        )
    )
    return ProfileMapper.to_session_response(session)


@router.post("/sign-in", response_model=SessionResponseDTO, summary="Sign in with email and password")
def sign_in(
    payload: SignInRequestDTO,
    use_case: SignIn = Depends(get_sign_in_use_case),
) -> SessionResponseDTO:
    session = use_case.execute(payload.email, payload.password)
    return ProfileMapper.to_session_response(session)


@router.post(
    "/refresh",
    response_model=SessionResponseDTO,
    summary="Exchange a refresh token for a new session",
)
def refresh(
    payload: RefreshRequestDTO,
    use_case: RefreshSession = Depends(get_refresh_session_use_case),
) -> SessionResponseDTO:
    session = use_case.execute(payload.refresh_token)
    return ProfileMapper.to_session_response(session)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT, summary="End the current session")
def sign_out(
    access_token: str = Depends(get_access_token),
    use_case: SignOut = Depends(get_sign_out_use_case),
) -> Response:
    use_case.execute(access_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
