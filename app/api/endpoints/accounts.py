"""Account endpoints: registration, sign-in, account reads and profile images."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Header, UploadFile

from app.api.dependencies import (
    get_account_query_service,
    get_current_identity,
    get_identity_provider,
    get_identity_verifier,
    get_profile_image_service,
    get_registration_service,
    require_account_access,
    require_admin,
)
from app.application.dtos.account import RegistrationCommand
from app.application.dtos.identity import Identity
from app.application.dtos.project import UploadedImage
from app.application.interfaces.services import IIdentityProvider
from app.application.services.identity_verifier import IdentityVerifier
from app.application.services.registration_service import RegistrationService
from app.application.use_cases.accounts import AccountQueryService, ProfileImageService
from app.domain.exceptions import ForbiddenException
from app.schemas.account import (
    FirstNameResponse,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    ProfileUploadResponse,
    RegisterRequest,
    RegisterResponse,
)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: RegisterRequest,
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
    authorization: Annotated[str | None, Header()] = None,
) -> RegisterResponse:
    """Create credential and account; admins also get a storage namespace and claim.

    Anyone may register a regular account. isAdmin=true needs an admin bearer
    token (401 without a valid one, 403 for a non-admin caller).
    """
    if body.is_admin:
        caller = await verifier.verify(authorization)
        if not caller.is_admin:
            raise ForbiddenException("Only admins can register admin accounts")
    result = await registration.register(
        RegistrationCommand(
            first_name=body.first_name,
            last_name=body.last_name,
            birthday=body.birthday,
            email=body.email,
            password=body.password,
            is_admin=body.is_admin,
        )
    )
    return RegisterResponse(message=result.message, user_id=result.user_id)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> LoginResponse:
    """Exchange email/password for an ID token usable as a bearer credential."""
    result = await provider.sign_in(body.email, body.password)
    return LoginResponse(
        id_token=result.id_token,
        user_id=result.uid,
        expires_in=result.expires_in,
    )


@router.get("/user", response_model=FirstNameResponse)
async def get_first_name(
    identity: Annotated[Identity, Depends(get_current_identity)],
    accounts: Annotated[AccountQueryService, Depends(get_account_query_service)],
) -> FirstNameResponse:
    """First name of the authenticated caller."""
    return FirstNameResponse(first_name=await accounts.get_first_name(identity.uid))


@router.get("/users")
async def list_users(
    _: Annotated[Identity, Depends(require_admin)],
    accounts: Annotated[AccountQueryService, Depends(get_account_query_service)],
) -> list[dict[str, Any]]:
    return await accounts.list_accounts()


@router.get("/api/users/{userId}")
async def get_user(
    user_id: Annotated[str, Depends(require_account_access)],
    accounts: Annotated[AccountQueryService, Depends(get_account_query_service)],
) -> dict[str, Any]:
    return await accounts.get_account(user_id)


@router.post("/uploadProfileImage/{userId}", response_model=ProfileUploadResponse)
async def upload_profile_image(
    user_id: Annotated[str, Depends(require_account_access)],
    profiles: Annotated[ProfileImageService, Depends(get_profile_image_service)],
    profile_image: Annotated[UploadFile | None, File(alias="profileImage")] = None,
) -> ProfileUploadResponse:
    """Store a profile image and save its download URL on the account."""
    image = None
    if profile_image is not None:
        image = UploadedImage(
            filename=profile_image.filename or "profile",
            content_type=profile_image.content_type or "application/octet-stream",
            data=await profile_image.read(),
        )
    url = await profiles.upload(user_id, image)
    return ProfileUploadResponse(download_url=url)


@router.get("/getProfile/{userId}", response_model=ProfileResponse)
async def get_profile(
    user_id: Annotated[str, Depends(require_account_access)],
    profiles: Annotated[ProfileImageService, Depends(get_profile_image_service)],
) -> ProfileResponse:
    return ProfileResponse(profile_url=await profiles.get_profile_url(user_id))
