"""
Reference data endpoint - districts, categories and status labels for forms.
"""

from fastapi import APIRouter
from app.core.constants import CATEGORIES, JHARKHAND_DISTRICTS, REPORT_STATUS_LABELS, SUBCATEGORIES


router = APIRouter(prefix="/meta", tags=["Meta"])


@router.get("")
async def get_reference_data():
    """Public, no token required."""
    return {
        "districts": JHARKHAND_DISTRICTS,
        "categories": CATEGORIES,
        "subcategories": SUBCATEGORIES,
        "status_labels": REPORT_STATUS_LABELS,
    }
