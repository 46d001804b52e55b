"""
Public admin endpoints - triage of reports within the caller's own scope.

The scope always comes from the resolved session; none of these endpoints
accept a district or category to act on.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.errors import JantaError
from app.models.reassignment import ReassignmentCreate, ReassignmentRequest
from app.models.report import Report, ReportStatus, StatusUpdateRequest
from app.routes.deps import public_admin_session, raise_http
from app.services.analytics_service import get_analytics_service
from app.services.reassignment_service import get_reassignment_service
from app.services.report_service import get_report_service
from app.services.session import SessionState
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public-admin", tags=["Public Admin"])


@router.get("/reports")
async def get_assigned_reports(
    status_filter: Optional[ReportStatus] = Query(None, alias="status", description="Filter by status"),
    session: SessionState = Depends(public_admin_session),
):
    """Reports in your (district, category)."""
    try:
        reports = get_report_service().list_scope_reports(
            session, status=status_filter.value if status_filter else None
        )
        return {
            "success": True,
            "count": len(reports),
            "reports": [Report(**r) for r in reports],
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Failed to list scope reports for {session.email}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve reports: {str(e)}"
        )


@router.patch("/reports/{report_id}/status", response_model=Report)
async def change_status(report_id: str, request: StatusUpdateRequest,
                        session: SessionState = Depends(public_admin_session)):
    """
    Change report status.

    **Allowed transitions:**
    - submitted -> in_progress | false_complaint
    - in_progress -> resolved | false_complaint

    Raises:
        400: Invalid status transition
        403: Report outside your scope, or your account is deactivated
        404: Report not found
    """
    try:
        return Report(**get_report_service().update_status(session, report_id, request))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Status update of {report_id} failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update status: {str(e)}"
        )


@router.post("/reports/{report_id}/reassignment", response_model=ReassignmentRequest,
             status_code=status.HTTP_201_CREATED)
async def request_reassignment(report_id: str, request: ReassignmentCreate,
                               session: SessionState = Depends(public_admin_session)):
    """Ask the state admin to move a report to another district/category."""
    try:
        return ReassignmentRequest(**get_reassignment_service().create_request(session, report_id, request))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Reassignment request for {report_id} failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to request reassignment: {str(e)}"
        )


@router.get("/reassignments")
async def get_my_reassignments(session: SessionState = Depends(public_admin_session)):
    try:
        requests = get_reassignment_service().list_my_requests(session)
        return {
            "success": True,
            "count": len(requests),
            "requests": [ReassignmentRequest(**r) for r in requests],
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve reassignment requests: {str(e)}"
        )


@router.get("/analytics")
async def get_analytics(
    days: int = Query(30, ge=1, le=365, description="Time range in days"),
    session: SessionState = Depends(public_admin_session),
):
    try:
        return get_analytics_service().get_scope_analytics(session, days=days)
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Analytics failed for {session.email}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute analytics: {str(e)}"
        )
