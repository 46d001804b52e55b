"""
Report service - Business logic for the report lifecycle.
Handles Firestore CRUD operations for reports.

DESIGN NOTE:
- Citizens file and withdraw; scoped public admins advance status;
  the state admin transfers and deletes
- Every mutation reads the report inside a transaction and re-checks the
  caller against what it read
- Status changes never touch scope and scope changes never touch status
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.constants import PUBLIC_ADMINS, REPORTS
from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.core.settings import settings
from app.models.report import ReportCreate, ReportStatus, StatusUpdateRequest
from app.models.user import UserRole
from app.services import access_policy
from app.services.session import SessionState
from app.services.status_workflow import StatusWorkflowEngine
from app.services.storage_service import ImageFile, get_storage_service
from app.utils import firestore_helpers
from app.utils.firestore_helpers import doc_to_dict, sort_newest_first, where_filter
from datetime import datetime
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class ReportService:

    def __init__(self, db=None, storage=None):
        self.db = db or get_db()
        self.storage = storage or get_storage_service()
        self.workflow = StatusWorkflowEngine()

    def _reports(self):
        return self.db.collection(REPORTS)

    def _fetch(self, report_id: str) -> Dict:
        report = doc_to_dict(self._reports().document(report_id).get())
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        return report

    # ------------------------------------------------------------------
    # Citizen
    # ------------------------------------------------------------------

    async def create_report(self, session: SessionState, report_data: ReportCreate,
                            images: Optional[List[ImageFile]] = None) -> Dict:
        """
        Create a new citizen report.

        Flow:
        1. Validate images (before any remote call)
        2. Upload all images concurrently; any failure aborts
        3. Insert the report with status submitted

        Returns:
            The created report
        """
        access_policy.require_role(session, UserRole.CITIZEN)
        images = images or []
        self.storage.validate_images(images)

        image_urls = await self.storage.upload_images(session.uid, images)

        doc_ref = self._reports().document()
        report_dict = {
            "user_id": session.uid,
            **report_data.model_dump(),
            "status": ReportStatus.SUBMITTED.value,
            "images": image_urls or None,
            "assigned_admin": None,
            "internal_notes": None,
            "created_at": firestore.SERVER_TIMESTAMP,
            "updated_at": firestore.SERVER_TIMESTAMP,
        }

        try:
            doc_ref.set(report_dict)
        except Exception as e:
            logger.error(f"Failed to save report to Firestore: {e}", exc_info=True)
            self.storage.delete_images(image_urls)
            raise

        logger.info(f"Report {doc_ref.id} filed by {session.uid} in ({report_data.district}, {report_data.category})")
        return doc_to_dict(doc_ref.get())

    def withdraw_report(self, session: SessionState, report_id: str, reason: str) -> Dict:
        """
        Withdraw a still-submitted report. The reason is appended to
        internal_notes for audit.

        Raises:
            ValidationError: Blank reason or report no longer submitted
            AuthorizationError: Caller does not own the report
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required to withdraw a report")
        access_policy.require_resolved(session)

        doc_ref = self._reports().document(report_id)

        def _withdraw(transaction):
            report = doc_to_dict(doc_ref.get(transaction=transaction))
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")

            access_policy.require_owner(session, report)
            self.workflow.validate_withdrawal(report.get("status"))

            transaction.update(doc_ref, {
                "status": ReportStatus.WITHDRAWN.value,
                "internal_notes": self.workflow.append_note(
                    report.get("internal_notes") or "", f"Withdrawal reason: {reason}"
                ),
                "updated_at": firestore.SERVER_TIMESTAMP,
            })

        firestore_helpers.run_transaction(self.db, _withdraw)
        logger.info(f"Report {report_id} withdrawn by {session.uid}")
        return self._fetch(report_id)

    def list_my_reports(self, session: SessionState) -> List[Dict]:
        access_policy.require_resolved(session)
        return self.list_reports(user_id=session.uid)

    def list_recent_reports(self, session: SessionState, limit: Optional[int] = None) -> List[Dict]:
        """Community feed: every report, newest first, internal notes hidden."""
        access_policy.require_resolved(session)
        reports = self.list_reports(limit=limit or settings.RECENT_REPORTS_LIMIT)
        return [access_policy.redact(session, report) for report in reports]

    def get_report(self, session: SessionState, report_id: str) -> Dict:
        access_policy.require_resolved(session)
        return access_policy.redact(session, self._fetch(report_id))

    # ------------------------------------------------------------------
    # Public admin
    # ------------------------------------------------------------------

    def list_scope_reports(self, session: SessionState, status: Optional[str] = None) -> List[Dict]:
        """Reports in the caller's own scope. The scope comes from the session, never from the request."""
        access_policy.require_role(session, UserRole.PUBLIC_ADMIN)
        if not session.public_admin:
            raise AuthorizationError("No active public admin scope for this account")

        return self.list_reports(
            status=status,
            district=session.public_admin["district"],
            category=session.public_admin["category"],
        )

    def update_status(self, session: SessionState, report_id: str, request: StatusUpdateRequest) -> Dict:
        """
        Advance a report's status. Stamps assigned_admin with the caller's email.

        Raises:
            AuthorizationError: Caller is not an active public admin for the report's scope
            ValidationError: Transition not allowed
        """
        access_policy.require_role(session, UserRole.PUBLIC_ADMIN)
        if not session.public_admin:
            raise AuthorizationError("No active public admin scope for this account")

        doc_ref = self._reports().document(report_id)
        admin_ref = self.db.collection(PUBLIC_ADMINS).document(session.public_admin["id"])
        new_status = request.status.value

        def _update(transaction):
            report = doc_to_dict(doc_ref.get(transaction=transaction))
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")
            admin_row = doc_to_dict(admin_ref.get(transaction=transaction))

            access_policy.require_scoped_admin(session, admin_row, report)
            self.workflow.validate_admin_transition(report.get("status"), new_status)

            update_data = {
                "status": new_status,
                "assigned_admin": admin_row["email"],
                "updated_at": firestore.SERVER_TIMESTAMP,
            }
            if request.internal_notes is not None:
                update_data["internal_notes"] = request.internal_notes.strip() or None

            transaction.update(doc_ref, update_data)
            return report.get("status")

        previous = firestore_helpers.run_transaction(self.db, _update)
        logger.info(f"Public admin {session.email} updated report {report_id}: {previous} -> {new_status}")
        return self._fetch(report_id)

    # ------------------------------------------------------------------
    # State admin
    # ------------------------------------------------------------------

    def list_all_reports(self, session: SessionState, status: Optional[str] = None,
                         district: Optional[str] = None, category: Optional[str] = None,
                         search: Optional[str] = None, limit: Optional[int] = None) -> List[Dict]:
        access_policy.require_state_admin(session)
        return self.list_reports(status=status, district=district, category=category,
                                 search=search, limit=limit)

    def transfer_report(self, session: SessionState, report_id: str, district: str, category: str) -> Dict:
        """
        Move a report to another scope. Clears assigned_admin; status is untouched.
        """
        access_policy.require_state_admin(session)
        doc_ref = self._reports().document(report_id)

        def _transfer(transaction):
            report = doc_to_dict(doc_ref.get(transaction=transaction))
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")
            if report.get("district") == district and report.get("category") == category:
                raise ValidationError(f"Report {report_id} is already in ({district}, {category})")

            transaction.update(doc_ref, {
                "district": district,
                "category": category,
                "assigned_admin": None,
                "updated_at": firestore.SERVER_TIMESTAMP,
            })

        firestore_helpers.run_transaction(self.db, _transfer)
        logger.info(f"State admin {session.email} transferred report {report_id} to ({district}, {category})")
        return self._fetch(report_id)

    def delete_report(self, session: SessionState, report_id: str) -> None:
        access_policy.require_state_admin(session)
        doc_ref = self._reports().document(report_id)
        if not doc_ref.get().exists:
            raise NotFoundError(f"Report {report_id} not found")

        doc_ref.delete()
        logger.info(f"State admin {session.email} deleted report {report_id}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_reports(self, status: Optional[str] = None, district: Optional[str] = None,
                     category: Optional[str] = None, user_id: Optional[str] = None,
                     search: Optional[str] = None, since: Optional[datetime] = None,
                     limit: Optional[int] = None) -> List[Dict]:
        """
        Fetch reports with equality filters.

        Text search and the created_at lower bound are applied in Python;
        results are sorted newest first before the limit is applied.
        """
        query = self._reports()

        if status:
            query = where_filter(query, "status", "==", status)
        if district:
            query = where_filter(query, "district", "==", district)
        if category:
            query = where_filter(query, "category", "==", category)
        if user_id:
            query = where_filter(query, "user_id", "==", user_id)

        reports = []
        for doc in query.stream():
            data = doc_to_dict(doc)

            if search:
                needle = search.lower()
                if needle not in data.get("title", "").lower() and needle not in data.get("description", "").lower():
                    continue

            if since:
                created_at = data.get("created_at")
                if created_at is None or created_at < since:
                    continue

            reports.append(data)

        reports = sort_newest_first(reports)
        if limit:
            reports = reports[:limit]

        logger.info(f"Retrieved {len(reports)} reports with filters: status={status}, district={district}, category={category}, user_id={user_id}, search={search}")
        return reports


# Global service instance (singleton pattern)
_report_service = None


def get_report_service() -> ReportService:
    global _report_service
    if _report_service is None:
        _report_service = ReportService()
    return _report_service
