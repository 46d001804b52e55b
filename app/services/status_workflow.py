"""
Status Workflow Engine - state machines for reports and reassignment requests.

DESIGN PRINCIPLES:
- No backward transitions, nothing re-enters submitted
- withdrawn, resolved and false_complaint are terminal
- Only the owning citizen withdraws, only scoped public admins advance
- Reassignment requests go pending -> approved | rejected, never back
"""

from typing import Dict, List

from app.core.errors import ValidationError
from app.models.reassignment import ReassignmentStatus
from app.models.report import ReportStatus


class StatusWorkflowEngine:
    """
    Strict state machine for report status transitions.

    Rules:
    - Admin transitions and the citizen withdrawal are separate tables
    - Setting the current status again is a no-op, except on terminal states
    """

    # Transitions a scoped public admin may perform: {from_status: [to_status, ...]}
    ADMIN_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.SUBMITTED: [ReportStatus.IN_PROGRESS, ReportStatus.FALSE_COMPLAINT],
        ReportStatus.IN_PROGRESS: [ReportStatus.RESOLVED, ReportStatus.FALSE_COMPLAINT],
        ReportStatus.RESOLVED: [],
        ReportStatus.FALSE_COMPLAINT: [],
        ReportStatus.WITHDRAWN: [],
    }

    # Transitions the owning citizen may perform
    CITIZEN_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.SUBMITTED: [ReportStatus.WITHDRAWN],
    }

    TERMINAL_STATES = frozenset({
        ReportStatus.RESOLVED,
        ReportStatus.FALSE_COMPLAINT,
        ReportStatus.WITHDRAWN,
    })

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        try:
            return ReportStatus(status) in cls.TERMINAL_STATES
        except ValueError:
            return False

    @classmethod
    def is_valid_admin_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if a public admin may move a report between these statuses.

        Args:
            from_status: Current status
            to_status: Desired new status

        Returns:
            True if transition is allowed, False otherwise
        """
        try:
            from_enum = ReportStatus(from_status)
            to_enum = ReportStatus(to_status)
        except ValueError:
            return False

        # Re-setting a live status is a no-op (used to edit internal notes)
        if from_enum == to_enum:
            return from_enum not in cls.TERMINAL_STATES

        return to_enum in cls.ADMIN_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        """List the statuses a public admin may set next."""
        try:
            current_enum = ReportStatus(current_status)
        except ValueError:
            return []
        return [status.value for status in cls.ADMIN_TRANSITIONS.get(current_enum, [])]

    @classmethod
    def validate_admin_transition(cls, current_status: str, new_status: str) -> None:
        """
        Raises:
            ValidationError: If the transition is not allowed
        """
        if not cls.is_valid_admin_transition(current_status, new_status):
            allowed = cls.get_allowed_transitions(current_status)
            raise ValidationError(
                f"Invalid status transition: {current_status} -> {new_status}. "
                f"Allowed transitions from {current_status}: {allowed}"
            )

    @classmethod
    def validate_withdrawal(cls, current_status: str) -> None:
        """
        Raises:
            ValidationError: Unless the report is still submitted
        """
        try:
            current_enum = ReportStatus(current_status)
        except ValueError:
            current_enum = None

        if ReportStatus.WITHDRAWN not in cls.CITIZEN_TRANSITIONS.get(current_enum, []):
            raise ValidationError(
                f"Only submitted reports can be withdrawn (current status: {current_status})"
            )

    @staticmethod
    def append_note(existing: str, note: str) -> str:
        """Append an audit line to internal_notes."""
        if existing:
            return f"{existing}\n{note}"
        return note


class ReassignmentWorkflow:
    """pending is the only state a request can leave."""

    @staticmethod
    def validate_resolution(current_status: str, new_status: ReassignmentStatus) -> None:
        """
        Raises:
            ValidationError: If the request is already resolved or the target is not terminal
        """
        if new_status == ReassignmentStatus.PENDING:
            raise ValidationError("A request can only be approved or rejected")
        if current_status != ReassignmentStatus.PENDING.value:
            raise ValidationError(
                f"Request already {current_status}; resolved requests are immutable"
            )
