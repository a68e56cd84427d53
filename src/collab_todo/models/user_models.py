"""
# User Models

Account records and authentication payloads.

- **User**: stored record, including the bcrypt password hash. Never returned to clients.
- **UserProfile**: public projection of a user.
- **LoginResponse**: token, its expiry and the authenticated user's profile.
- **UpdateProfileRequest**: partial change of the display name or avatar URL.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from collab_todo.utils.validation import ensure_not_blank, ensure_safe_text, looks_like_email

NAME_MAX_LENGTH = 100
PROFILE_IMAGE_URL_MAX_LENGTH = 500


class User(BaseModel):
    """
    Stored user account.

    Attributes:
        id (str): UUID4 string.
        email (str): Lower-cased, trimmed email; unique.
        password_hash (str): bcrypt hash of the password.
        name (str): Display name.
        profile_image_url (Optional[str]): Optional avatar URL.
        created_at (datetime): Registration timestamp (UTC).
        updated_at (datetime): Last profile change (UTC).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    password_hash: str
    name: str
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def to_profile(self) -> "UserProfile":
        return UserProfile(
            id=self.id,
            email=self.email,
            name=self.name,
            profile_image_url=self.profile_image_url,
            created_at=self.created_at,
        )


class UserProfile(BaseModel):
    id: str
    email: str
    name: str
    profile_image_url: Optional[str] = None
    created_at: datetime


class UserRegistrationRequest(BaseModel):
    """Request model for creating an account. Password length is checked against settings by the auth service."""

    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Plain-text password")
    name: str = Field(..., max_length=NAME_MAX_LENGTH, description="Display name")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not looks_like_email(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        ensure_not_blank(v, "Name")
        return ensure_safe_text(v.strip(), "Name")


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        return ensure_not_blank(v, info.field_name.capitalize())


class TokenVerificationRequest(BaseModel):
    token: str


class LoginResponse(BaseModel):
    token: str
    expires_at: datetime
    user: UserProfile


class UpdateProfileRequest(BaseModel):
    """Partial profile update; fields left as `None` keep their stored value."""

    name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH, description="Display name")
    profile_image_url: Optional[str] = Field(None, max_length=PROFILE_IMAGE_URL_MAX_LENGTH, description="Avatar URL")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        ensure_not_blank(v, "Name")
        return ensure_safe_text(v.strip(), "Name")

    @field_validator("profile_image_url")
    @classmethod
    def validate_profile_image_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v.startswith(("http://", "https://", "/")):
            raise ValueError("Profile image URL must be an http(s) URL or an absolute path")
        return ensure_safe_text(v, "Profile image URL")

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)
