"""
Reassignment request models.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from enum import Enum

from app.core.constants import CATEGORIES, JHARKHAND_DISTRICTS
from app.models.report import Report


class ReassignmentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReassignmentCreate(BaseModel):
    """A public admin's proposal to move a report to another scope."""
    suggested_district: str
    suggested_category: str
    reason: str = Field(..., min_length=1, max_length=1000)

    @field_validator("suggested_district")
    @classmethod
    def known_district(cls, value: str) -> str:
        if value not in JHARKHAND_DISTRICTS:
            raise ValueError(f"Unknown district: {value}")
        return value

    @field_validator("suggested_category")
    @classmethod
    def known_category(cls, value: str) -> str:
        if value not in CATEGORIES:
            raise ValueError(f"Unknown category: {value}")
        return value


class ReassignmentRequest(BaseModel):
    id: str = Field(..., description="Firestore document ID")
    report_id: str
    requesting_admin: str = Field(..., description="Email of the requesting public admin")
    suggested_category: str
    suggested_district: str
    reason: str
    status: ReassignmentStatus = ReassignmentStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReassignmentWithReport(BaseModel):
    """Request joined with its report. report is None when the report was deleted."""
    request: ReassignmentRequest
    report: Optional[Report] = None
    report_missing: bool = False
