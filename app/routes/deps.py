"""
Request dependencies: bearer token -> principal -> resolved session.

Each request gets its own SessionManager; the session is built from the
presented token and discarded with the request.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import JantaError
from app.models.user import UserRole
from app.services.auth_service import get_auth_service
from app.services.role_resolver import get_role_resolver
from app.services.session import Principal, SessionEvent, SessionManager, SessionState

bearer_scheme = HTTPBearer(auto_error=False)


def raise_http(exc: JantaError):
    """Translate a service error into an HTTPException."""
    raise HTTPException(status_code=exc.status_code, detail=exc.message)


def get_principal(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Principal:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return get_auth_service().verify_token(credentials.credentials)
    except JantaError as e:
        raise_http(e)


def get_session(principal: Principal = Depends(get_principal)) -> SessionState:
    """
    Resolve the caller's role. An unresolved role blocks the request (503)
    rather than falling back to any role.
    """
    manager = SessionManager(get_role_resolver())
    session = manager.handle_event(SessionEvent.INITIAL_SESSION, principal)
    if not session.is_resolved:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not resolve your role. Please retry.",
        )
    return session


def require_role(*roles: UserRole):
    """Dependency factory restricting a route to the given roles."""

    def _check(session: SessionState = Depends(get_session)) -> SessionState:
        if session.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This endpoint requires role: {', '.join(role.value for role in roles)}",
            )
        return session

    return _check


citizen_session = require_role(UserRole.CITIZEN)
public_admin_session = require_role(UserRole.PUBLIC_ADMIN)
state_admin_session = require_role(UserRole.ADMIN)
