"""
Reassignment Service - public admins propose moving a report to another
(district, category); the state admin approves or rejects.

DESIGN PRINCIPLES:
- pending -> approved | rejected, resolved requests are immutable
- Approval updates the request and the report in ONE transaction:
  either both change or neither does
- Rejection never touches the report
- Several pending requests for the same report are allowed
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.constants import PUBLIC_ADMINS, REASSIGNMENT_REQUESTS, REPORTS
from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.models.reassignment import ReassignmentCreate, ReassignmentStatus
from app.models.user import UserRole
from app.services import access_policy
from app.services.session import SessionState
from app.services.status_workflow import ReassignmentWorkflow
from app.utils import firestore_helpers
from app.utils.firestore_helpers import doc_to_dict, sort_newest_first, where_filter
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class ReassignmentService:

    def __init__(self, db=None):
        self.db = db or get_db()
        self.workflow = ReassignmentWorkflow()

    def _requests(self):
        return self.db.collection(REASSIGNMENT_REQUESTS)

    def create_request(self, session: SessionState, report_id: str, request: ReassignmentCreate) -> Dict:
        """
        File a reassignment request for a report in the caller's scope.

        Raises:
            ValidationError: Blank reason or suggestion equal to the current scope
            AuthorizationError: Report is not in the caller's active scope
            NotFoundError: Report does not exist
        """
        reason = request.reason.strip()
        if not reason:
            raise ValidationError("A reason is required to request reassignment")

        access_policy.require_role(session, UserRole.PUBLIC_ADMIN)
        if not session.public_admin:
            raise AuthorizationError("No active public admin scope for this account")

        report_ref = self.db.collection(REPORTS).document(report_id)
        admin_ref = self.db.collection(PUBLIC_ADMINS).document(session.public_admin["id"])
        request_ref = self._requests().document()

        def _create(transaction):
            report = doc_to_dict(report_ref.get(transaction=transaction))
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")
            admin_row = doc_to_dict(admin_ref.get(transaction=transaction))

            access_policy.require_scoped_admin(session, admin_row, report)
            if (report.get("district") == request.suggested_district
                    and report.get("category") == request.suggested_category):
                raise ValidationError("Suggested district and category match the current assignment")

            transaction.create(request_ref, {
                "report_id": report_id,
                "requesting_admin": admin_row["email"],
                "suggested_category": request.suggested_category,
                "suggested_district": request.suggested_district,
                "reason": reason,
                "status": ReassignmentStatus.PENDING.value,
                "created_at": firestore.SERVER_TIMESTAMP,
                "updated_at": firestore.SERVER_TIMESTAMP,
            })

        firestore_helpers.run_transaction(self.db, _create)
        logger.info(
            f"Reassignment {request_ref.id} requested by {session.email} for report {report_id} "
            f"-> ({request.suggested_district}, {request.suggested_category})"
        )
        return doc_to_dict(request_ref.get())

    def approve_request(self, session: SessionState, request_id: str) -> Dict:
        """
        Approve a pending request and apply it to the report atomically.

        Returns:
            Dict with the updated request and report
        """
        access_policy.require_state_admin(session)
        request_ref = self._requests().document(request_id)

        def _approve(transaction):
            request = doc_to_dict(request_ref.get(transaction=transaction))
            if request is None:
                raise NotFoundError(f"Reassignment request {request_id} not found")
            self.workflow.validate_resolution(request.get("status"), ReassignmentStatus.APPROVED)

            report_ref = self.db.collection(REPORTS).document(request["report_id"])
            report = doc_to_dict(report_ref.get(transaction=transaction))
            if report is None:
                raise NotFoundError(
                    f"Report {request['report_id']} referenced by request {request_id} no longer exists"
                )

            transaction.update(request_ref, {
                "status": ReassignmentStatus.APPROVED.value,
                "updated_at": firestore.SERVER_TIMESTAMP,
            })
            transaction.update(report_ref, {
                "district": request["suggested_district"],
                "category": request["suggested_category"],
                "assigned_admin": None,
                "updated_at": firestore.SERVER_TIMESTAMP,
            })
            return report_ref

        report_ref = firestore_helpers.run_transaction(self.db, _approve)
        logger.info(f"State admin {session.email} approved reassignment {request_id} for report {report_ref.id}")
        return {
            "request": doc_to_dict(request_ref.get()),
            "report": doc_to_dict(report_ref.get()),
        }

    def reject_request(self, session: SessionState, request_id: str) -> Dict:
        access_policy.require_state_admin(session)
        request_ref = self._requests().document(request_id)

        def _reject(transaction):
            request = doc_to_dict(request_ref.get(transaction=transaction))
            if request is None:
                raise NotFoundError(f"Reassignment request {request_id} not found")
            self.workflow.validate_resolution(request.get("status"), ReassignmentStatus.REJECTED)

            transaction.update(request_ref, {
                "status": ReassignmentStatus.REJECTED.value,
                "updated_at": firestore.SERVER_TIMESTAMP,
            })

        firestore_helpers.run_transaction(self.db, _reject)
        logger.info(f"State admin {session.email} rejected reassignment {request_id}")
        return doc_to_dict(request_ref.get())

    def list_requests(self, session: SessionState, status: Optional[str] = None) -> List[Dict]:
        """
        All requests joined with their report.

        A request whose report was deleted is returned with report None and
        report_missing True.
        """
        access_policy.require_state_admin(session)

        query = self._requests()
        if status:
            query = where_filter(query, "status", "==", status)
        requests = sort_newest_first([doc_to_dict(doc) for doc in query.stream()])

        reports_ref = self.db.collection(REPORTS)
        joined = []
        for request in requests:
            report = doc_to_dict(reports_ref.document(request["report_id"]).get())
            if report is None:
                logger.warning(f"Reassignment {request['id']} references missing report {request['report_id']}")
            joined.append({
                "request": request,
                "report": report,
                "report_missing": report is None,
            })

        return joined

    def list_my_requests(self, session: SessionState) -> List[Dict]:
        access_policy.require_role(session, UserRole.PUBLIC_ADMIN)
        query = where_filter(self._requests(), "requesting_admin", "==", (session.email or "").lower())
        return sort_newest_first([doc_to_dict(doc) for doc in query.stream()])

    def count_pending(self) -> int:
        query = where_filter(self._requests(), "status", "==", ReassignmentStatus.PENDING.value)
        return sum(1 for _ in query.stream())


# Global service instance (singleton pattern)
_reassignment_service = None


def get_reassignment_service() -> ReassignmentService:
    global _reassignment_service
    if _reassignment_service is None:
        _reassignment_service = ReassignmentService()
    return _reassignment_service
