"""
Pydantic models for citizen reports.
These models handle validation for report submission, admin actions and responses.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional, List
from enum import Enum

from app.core.constants import CATEGORIES, JHARKHAND_DISTRICTS, SUBCATEGORIES


class ReportStatus(str, Enum):
    """
    Report lifecycle.

    submitted -> in_progress -> resolved | false_complaint
    submitted -> withdrawn (citizen only)
    """
    SUBMITTED = "submitted"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    FALSE_COMPLAINT = "false_complaint"
    WITHDRAWN = "withdrawn"


class ReportCreate(BaseModel):
    """
    Model for creating a new report.
    These are the fields citizens provide when submitting a report.
    """
    title: str = Field(..., min_length=3, max_length=200, description="Short summary of the issue")
    description: str = Field(..., min_length=5, max_length=2000, description="What the citizen observed")
    category: str = Field(..., description="Department responsible for the issue")
    subcategory: str = Field(..., description="Issue type within the category")
    district: str = Field(..., description="District where the issue is located")
    sector_number: str = Field(..., min_length=1, max_length=50, description="Sector / ward number")
    address_line: str = Field(..., min_length=1, max_length=300, description="Street address or landmark")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("title", "description", "sector_number", "address_line")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field cannot be blank")
        return value

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

    @model_validator(mode="after")
    def subcategory_matches_category(self):
        if self.subcategory not in SUBCATEGORIES.get(self.category, []):
            raise ValueError(f"Subcategory '{self.subcategory}' does not belong to category '{self.category}'")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Pothole on Main Rd",
                "description": "Deep pothole near the bus stop, two-wheelers slipping.",
                "category": "Municipal",
                "subcategory": "Pothole",
                "district": "Ranchi",
                "sector_number": "4",
                "address_line": "Main Rd, near Kutchery Chowk",
                "latitude": 23.3441,
                "longitude": 85.3096,
            }
        }
        extra = "ignore"


class Report(BaseModel):
    """Model for report responses (what the API returns)."""
    id: str = Field(..., description="Firestore document ID")
    user_id: str
    title: str
    description: str
    category: str
    subcategory: str
    district: str
    sector_number: str
    address_line: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    status: ReportStatus = ReportStatus.SUBMITTED
    images: Optional[List[str]] = None
    assigned_admin: Optional[str] = Field(None, description="Email of the public admin who last acted")
    internal_notes: Optional[str] = Field(None, description="Visible to admins and the report owner")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StatusUpdateRequest(BaseModel):
    """Public admin status change, optionally with internal notes."""
    status: ReportStatus
    internal_notes: Optional[str] = Field(None, max_length=2000)


class WithdrawRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000, description="Why the citizen withdraws the report")


class TransferRequest(BaseModel):
    """State admin moves a report to another scope."""
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
