"""
State admin endpoints - public admin accounts, all reports, reassignments.

SCOPE OF STATE ADMIN:
- Add, edit, activate and deactivate public admins
- See every report, transfer a report to another scope, delete a report
- Approve or reject reassignment requests

- NOT change report status (that belongs to the scoped public admin)
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional

from app.core.errors import JantaError
from app.models.public_admin import PublicAdmin, PublicAdminCreate, PublicAdminUpdate
from app.models.reassignment import ReassignmentRequest, ReassignmentStatus, ReassignmentWithReport
from app.models.report import Report, ReportStatus, TransferRequest
from app.routes.deps import raise_http, state_admin_session
from app.services.analytics_service import get_analytics_service
from app.services.public_admin_service import get_public_admin_service
from app.services.reassignment_service import get_reassignment_service
from app.services.report_service import get_report_service
from app.services.session import SessionState
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _server_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Admin action failed ({action}): {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(e)}"
    )


@router.get("/dashboard")
async def get_dashboard(session: SessionState = Depends(state_admin_session)):
    try:
        return get_analytics_service().get_dashboard(session)
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("load dashboard", e)


# ----------------------------------------------------------------------
# Public admins
# ----------------------------------------------------------------------

@router.get("/public-admins")
async def get_public_admins(
    active_only: bool = Query(False, description="Only active accounts"),
    session: SessionState = Depends(state_admin_session),
):
    try:
        admins = get_public_admin_service().list_public_admins(active_only=active_only)
        return {
            "success": True,
            "count": len(admins),
            "public_admins": [PublicAdmin(**a) for a in admins],
        }
    except Exception as e:
        raise _server_error("list public admins", e)


@router.post("/public-admins", response_model=PublicAdmin, status_code=status.HTTP_201_CREATED)
async def add_public_admin(request: PublicAdminCreate, session: SessionState = Depends(state_admin_session)):
    """Authorize an email for one (district, category) scope."""
    try:
        return PublicAdmin(**get_public_admin_service().add_public_admin(request))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("add public admin", e)


@router.patch("/public-admins/{admin_id}", response_model=PublicAdmin)
async def update_public_admin(admin_id: str, request: PublicAdminUpdate,
                              session: SessionState = Depends(state_admin_session)):
    """Edit scope or set is_active. Deactivation revokes access but keeps the row."""
    try:
        return PublicAdmin(**get_public_admin_service().update_public_admin(admin_id, request))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("update public admin", e)


@router.post("/public-admins/{admin_id}/toggle", response_model=PublicAdmin)
async def toggle_public_admin(admin_id: str, session: SessionState = Depends(state_admin_session)):
    try:
        return PublicAdmin(**get_public_admin_service().toggle_active(admin_id))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("toggle public admin", e)


# ----------------------------------------------------------------------
# Reports
# ----------------------------------------------------------------------

@router.get("/reports")
async def get_reports(
    status_filter: Optional[ReportStatus] = Query(None, alias="status", description="Filter by status"),
    district: Optional[str] = Query(None, description="Filter by district"),
    category: Optional[str] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of reports"),
    session: SessionState = Depends(state_admin_session),
):
    try:
        reports = get_report_service().list_all_reports(
            session,
            status=status_filter.value if status_filter else None,
            district=district,
            category=category,
            search=search,
            limit=limit,
        )
        return {
            "success": True,
            "count": len(reports),
            "reports": [Report(**r) for r in reports],
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("retrieve reports", e)


@router.patch("/reports/{report_id}/transfer", response_model=Report)
async def transfer_report(report_id: str, request: TransferRequest,
                          session: SessionState = Depends(state_admin_session)):
    """Move a report to another scope. Clears assigned_admin, keeps status."""
    try:
        return Report(**get_report_service().transfer_report(session, report_id, request.district, request.category))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("transfer report", e)


@router.delete("/reports/{report_id}")
async def delete_report(report_id: str, session: SessionState = Depends(state_admin_session)):
    try:
        get_report_service().delete_report(session, report_id)
        return {"success": True, "message": f"Report {report_id} deleted"}
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("delete report", e)


# ----------------------------------------------------------------------
# Reassignment requests
# ----------------------------------------------------------------------

@router.get("/reassignments")
async def get_reassignments(
    status_filter: Optional[ReassignmentStatus] = Query(None, alias="status", description="Filter by status"),
    session: SessionState = Depends(state_admin_session),
):
    """Requests joined with their reports. Deleted reports show as report_missing."""
    try:
        joined = get_reassignment_service().list_requests(
            session, status=status_filter.value if status_filter else None
        )
        return {
            "success": True,
            "count": len(joined),
            "requests": [
                ReassignmentWithReport(
                    request=ReassignmentRequest(**item["request"]),
                    report=Report(**item["report"]) if item["report"] else None,
                    report_missing=item["report_missing"],
                )
                for item in joined
            ],
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("retrieve reassignment requests", e)


@router.post("/reassignments/{request_id}/approve")
async def approve_reassignment(request_id: str, session: SessionState = Depends(state_admin_session)):
    """
    Approve a pending request: the report moves to the suggested scope and
    its assigned_admin is cleared, in the same transaction.
    """
    try:
        result = get_reassignment_service().approve_request(session, request_id)
        return {
            "success": True,
            "message": "Reassignment request approved",
            "request": ReassignmentRequest(**result["request"]),
            "report": Report(**result["report"]),
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("approve reassignment request", e)


@router.post("/reassignments/{request_id}/reject")
async def reject_reassignment(request_id: str, session: SessionState = Depends(state_admin_session)):
    try:
        request = get_reassignment_service().reject_request(session, request_id)
        return {
            "success": True,
            "message": "Reassignment request rejected",
            "request": ReassignmentRequest(**request),
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise _server_error("reject reassignment request", e)
