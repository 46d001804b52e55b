"""
Access policy - server-side equivalent of row-level policies.

Every mutation re-checks the caller against the rows it is about to write,
using data read inside the same transaction. Listing filters are a
convenience only and are never treated as authorization.
"""

from typing import Dict, Optional

from app.core.errors import AuthorizationError, RoleUnresolvedError
from app.models.user import UserRole
from app.services.session import SessionState


def require_resolved(session: SessionState) -> None:
    if not session.is_resolved:
        raise RoleUnresolvedError("Role could not be resolved for this session")


def require_role(session: SessionState, *roles: UserRole) -> None:
    require_resolved(session)
    if session.role not in roles:
        allowed = ", ".join(role.value for role in roles)
        raise AuthorizationError(f"This action requires role: {allowed}")


def require_state_admin(session: SessionState) -> None:
    require_role(session, UserRole.ADMIN)


def in_scope(public_admin: Optional[Dict], report: Dict) -> bool:
    """True when an active public admin row covers the report's current scope."""
    if not public_admin or not public_admin.get("is_active"):
        return False
    return (
        public_admin.get("district") == report.get("district")
        and public_admin.get("category") == report.get("category")
    )


def require_scoped_admin(session: SessionState, current_admin_row: Optional[Dict], report: Dict) -> None:
    """
    Args:
        session: Resolved session of the caller
        current_admin_row: The caller's public admin row as read now (not the
            copy cached in the session), or None if it no longer exists
        report: The report as read now
    """
    require_role(session, UserRole.PUBLIC_ADMIN)
    if current_admin_row is None or current_admin_row.get("email") != (session.email or "").lower():
        raise AuthorizationError("No public admin scope for this account")
    if not current_admin_row.get("is_active"):
        raise AuthorizationError("Public admin account is deactivated")
    if not in_scope(current_admin_row, report):
        raise AuthorizationError(
            f"Report {report.get('id')} is outside your scope "
            f"({current_admin_row.get('district')}, {current_admin_row.get('category')})"
        )


def require_owner(session: SessionState, report: Dict) -> None:
    require_resolved(session)
    if report.get("user_id") != session.uid:
        raise AuthorizationError("Only the citizen who filed this report can do that")


def can_see_internal_notes(session: SessionState, report: Dict) -> bool:
    if session.role == UserRole.ADMIN:
        return True
    if session.role == UserRole.PUBLIC_ADMIN:
        return in_scope(session.public_admin, report)
    return report.get("user_id") == session.uid


def redact(session: SessionState, report: Dict) -> Dict:
    """Hide internal notes from callers who may not read them."""
    if can_see_internal_notes(session, report):
        return report
    return {**report, "internal_notes": None}
