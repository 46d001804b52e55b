"""
Authentication endpoints - email/password accounts and the session lifecycle.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.core.errors import JantaError
from app.models.user import AuthResponse, RefreshRequest, SessionResponse, SignInRequest, SignUpRequest
from app.routes.deps import get_principal, get_session, raise_http
from app.services.auth_service import get_auth_service
from app.services.role_resolver import get_role_resolver
from app.services.session import Principal, SessionEvent, SessionManager, SessionState
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(tokens: dict, principal: Principal, event: SessionEvent, message: str) -> AuthResponse:
    manager = SessionManager(get_role_resolver())
    session = manager.handle_event(event, principal)

    if not session.is_resolved:
        message = f"{message}, but your role could not be resolved. Please retry."

    return AuthResponse(
        success=True,
        message=message,
        id_token=tokens["id_token"],
        refresh_token=tokens["refresh_token"],
        expires_in=tokens["expires_in"],
        session=session.to_response() if session.is_resolved else None,
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(request: SignUpRequest):
    """
    Create an account and sign it in. New accounts start as citizens.
    """
    try:
        tokens = get_auth_service().sign_up(request.email, request.password)
        principal = Principal(uid=tokens["uid"], email=tokens["email"])
        return _auth_response(tokens, principal, SessionEvent.SIGNED_IN, "Account created successfully")

    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Sign-up failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Sign-up failed: {str(e)}"
        )


@router.post("/signin", response_model=AuthResponse)
async def sign_in(request: SignInRequest):
    """
    Sign in with email and password.

    Returns tokens plus the resolved session (role, profile and, for public
    admins, the active scope).
    """
    try:
        tokens = get_auth_service().sign_in(request.email, request.password)
        principal = Principal(uid=tokens["uid"], email=tokens["email"])
        return _auth_response(tokens, principal, SessionEvent.SIGNED_IN, "Signed in successfully")

    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Sign-in failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Sign-in failed: {str(e)}"
        )


@router.post("/refresh", response_model=AuthResponse)
async def refresh(request: RefreshRequest):
    """Exchange a refresh token for a new ID token and re-resolve the role."""
    try:
        auth_service = get_auth_service()
        tokens = auth_service.refresh(request.refresh_token)
        principal = auth_service.verify_token(tokens["id_token"])
        return _auth_response(tokens, principal, SessionEvent.TOKEN_REFRESHED, "Session refreshed")

    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Token refresh failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Token refresh failed: {str(e)}"
        )


@router.post("/signout")
async def sign_out(principal: Principal = Depends(get_principal)):
    """
    Revoke the principal's refresh tokens.

    Sessions are resolved per request from a verified token, so revocation
    is what ends the session; there is no server-side state to clear.
    """
    try:
        get_auth_service().sign_out(principal.uid)
        return {"success": True, "message": "Signed out successfully"}

    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Sign-out failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Sign-out failed: {str(e)}"
        )


@router.get("/me", response_model=SessionResponse)
async def get_current_session(session: SessionState = Depends(get_session)):
    """Current resolved session."""
    return session.to_response()
