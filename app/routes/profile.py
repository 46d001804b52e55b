"""
Profile endpoints - the caller's own profile.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.core.errors import JantaError
from app.models.user import ProfileUpdate, UserProfile
from app.routes.deps import get_session, raise_http
from app.services.session import SessionState
from app.services.user_service import get_user_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=UserProfile)
async def get_profile(session: SessionState = Depends(get_session)):
    return UserProfile(**session.profile)


@router.patch("", response_model=UserProfile)
async def update_profile(request: ProfileUpdate, session: SessionState = Depends(get_session)):
    """
    Update name and/or phone. Role and email cannot be changed here.
    """
    try:
        profile = get_user_service().update_profile(session.uid, name=request.name, phone=request.phone)
        return UserProfile(**profile)

    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Profile update failed for {session.uid}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update profile: {str(e)}"
        )
