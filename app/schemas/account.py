"""Account, registration and sign-in API schemas."""

from pydantic import AliasChoices, EmailStr, Field

from app.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """Request body for POST /register. Accepts 'bday' or 'birthday'."""

    first_name: str = Field(..., min_length=1, max_length=128)
    last_name: str = Field(..., min_length=1, max_length=128)
    birthday: str = Field(..., validation_alias=AliasChoices("bday", "birthday"))
    email: EmailStr
    password: str = Field(..., min_length=6)
    is_admin: bool = False


class RegisterResponse(CamelModel):
    message: str
    user_id: str


class LoginRequest(CamelModel):
    """Request body for POST /login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    id_token: str
    user_id: str
    expires_in: int = Field(..., description="Token lifetime in seconds")


class FirstNameResponse(CamelModel):
    """Response for GET /user."""

    first_name: str


class ProfileUploadResponse(CamelModel):
    message: str = "Profile image uploaded successfully"
    download_url: str


class ProfileResponse(CamelModel):
    """Response for GET /getProfile/{userId}; profileUrl is null until an upload."""

    profile_url: str | None = None
