"""
Public admin models. One row grants a principal (by email) the right to act
on reports of exactly one (district, category) scope.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from app.core.constants import CATEGORIES, JHARKHAND_DISTRICTS


class PublicAdmin(BaseModel):
    id: str = Field(..., description="Firestore document ID")
    email: str
    district: str
    category: str
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublicAdminCreate(BaseModel):
    """Request from the state admin to authorize a new public admin."""
    email: EmailStr
    district: str
    category: str

    @field_validator("district")
    @classmethod
    def known_district(cls, value: str) -> str:
        if value not in JHARKHAND_DISTRICTS:
            raise ValueError(f"Unknown district: {value}")
        return value

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str) -> str:
        if value not in CATEGORIES:
            raise ValueError(f"Unknown category: {value}")
        return value


class PublicAdminUpdate(BaseModel):
    """Scope edit and/or activation change. At least one field is required."""
    district: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("district")
    @classmethod
    def known_district(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in JHARKHAND_DISTRICTS:
            raise ValueError(f"Unknown district: {value}")
        return value

    @field_validator("category")
    @classmethod
    def known_category(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in CATEGORIES:
            raise ValueError(f"Unknown category: {value}")
        return value

    @model_validator(mode="after")
    def not_empty(self):
        if self.district is None and self.category is None and self.is_active is None:
            raise ValueError("Nothing to update")
        return self
