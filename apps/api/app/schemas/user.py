"""User account API schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("Input should be a valid URL") from None
    return value


# Validated as a URL but kept exactly as sent.
PhotoUrl = Annotated[str, AfterValidator(_check_url)]


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    display_name: str | None = Field(default=None, alias="displayName")
    photo_url: PhotoUrl | None = Field(default=None, alias="photoURL")
    disabled: bool = False
    email_verified: bool = Field(default=False, alias="emailVerified")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProfileUpdateRequest(BaseModel):
    """Partial self-service profile update; omitted or null fields are left untouched."""

    display_name: str | None = Field(default=None, alias="displayName")
    photo_url: PhotoUrl | None = Field(default=None, alias="photoURL")
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UpdateUserRequest(ProfileUpdateRequest):
    """Administrative update; may also change account status flags."""

    disabled: bool | None = None
    email_verified: bool | None = Field(default=None, alias="emailVerified")


class CreateUserResponse(BaseModel):
    message: str
    uid: str


class UserProfile(BaseModel):
    uid: str
    email: str | None = None
    display_name: str | None = Field(default=None, serialization_alias="displayName")
    photo_url: str | None = Field(default=None, serialization_alias="photoURL")
    disabled: bool | None = None
    email_verified: bool = Field(default=False, serialization_alias="emailVerified")
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")
    last_sign_in_time: datetime | None = Field(default=None, serialization_alias="lastSignInTime")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")
