"""
Report endpoints - citizen submission, withdrawal and the community feed.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import JantaError
from app.models.report import Report, ReportCreate, WithdrawRequest
from app.routes.deps import citizen_session, get_session, raise_http
from app.services.report_service import get_report_service
from app.services.session import SessionState
from app.services.storage_service import ImageFile
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("", response_model=Report, status_code=status.HTTP_201_CREATED)
async def submit_report(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    subcategory: str = Form(...),
    district: str = Form(...),
    sector_number: str = Form(...),
    address_line: str = Form(...),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    session: SessionState = Depends(citizen_session),
):
    """
    Submit a new citizen report (multipart form, up to 5 images).

    This endpoint:
    1. Validates the form fields and images
    2. Uploads the images concurrently to Storage
    3. Stores the report with status submitted
    """
    try:
        report_data = ReportCreate(
            title=title,
            description=description,
            category=category,
            subcategory=subcategory,
            district=district,
            sector_number=sector_number,
            address_line=address_line,
            latitude=latitude,
            longitude=longitude,
        )
    except PydanticValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False)
        )

    try:
        image_files = [
            ImageFile(filename=upload.filename or "image", content=await upload.read(), content_type=upload.content_type)
            for upload in (images or [])
        ]

        logger.info(f"POST /reports - {session.uid} filing in ({district}, {category}) with {len(image_files)} image(s)")
        report = await get_report_service().create_report(session, report_data, image_files)
        return Report(**report)

    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"POST /reports - Report creation failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Report creation failed: {str(e)}"
        )


@router.get("")
async def get_recent_reports(
    limit: int = Query(50, ge=1, le=200, description="Maximum number of reports"),
    session: SessionState = Depends(get_session),
):
    """Community feed, newest first."""
    try:
        reports = get_report_service().list_recent_reports(session, limit=limit)
        return {
            "success": True,
            "count": len(reports),
            "reports": [Report(**r) for r in reports],
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"GET /reports failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve reports: {str(e)}"
        )


@router.get("/mine")
async def get_my_reports(session: SessionState = Depends(get_session)):
    """Reports filed by the caller."""
    try:
        reports = get_report_service().list_my_reports(session)
        return {
            "success": True,
            "count": len(reports),
            "reports": [Report(**r) for r in reports],
        }
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"GET /reports/mine failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve your reports: {str(e)}"
        )


@router.get("/{report_id}", response_model=Report)
async def get_report(report_id: str, session: SessionState = Depends(get_session)):
    try:
        return Report(**get_report_service().get_report(session, report_id))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"GET /reports/{report_id} failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve report: {str(e)}"
        )


@router.post("/{report_id}/withdraw", response_model=Report)
async def withdraw_report(report_id: str, request: WithdrawRequest, session: SessionState = Depends(get_session)):
    """
    Withdraw one of your own reports while it is still submitted.

    Raises:
        400: Blank reason or report no longer submitted
        403: Not your report
        404: Report not found
    """
    try:
        return Report(**get_report_service().withdraw_report(session, report_id, request.reason))
    except JantaError as e:
        raise_http(e)
    except Exception as e:
        logger.error(f"Withdrawal of {report_id} failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to withdraw report: {str(e)}"
        )
