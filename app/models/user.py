"""
User models for authentication, profiles and the resolved session.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from enum import Enum
from typing import Optional

from app.models.public_admin import PublicAdmin


class UserRole(str, Enum):
    """The three roles that govern what a principal may see and do."""
    CITIZEN = "citizen"
    PUBLIC_ADMIN = "public_admin"
    ADMIN = "admin"


class UserProfile(BaseModel):
    """Profile stored in user_profiles, keyed by the Firebase uid."""
    id: str = Field(..., description="Firebase uid (document ID)")
    email: str
    name: str = Field(default="", description="Display name, empty until onboarding")
    phone: Optional[str] = None
    user_role: UserRole = UserRole.CITIZEN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be blank")
        return value


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Resolved session as seen by the frontend."""
    uid: str
    email: str
    role: UserRole
    profile: Optional[UserProfile] = None
    public_admin: Optional[PublicAdmin] = None
    needs_onboarding: bool = False


class AuthResponse(BaseModel):
    """Authentication response."""
    success: bool
    message: str
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    session: Optional[SessionResponse] = None
