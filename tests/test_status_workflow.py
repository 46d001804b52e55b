# tests/test_status_workflow.py
import pytest

from app.core.errors import ValidationError
from app.models.reassignment import ReassignmentStatus
from app.services.status_workflow import ReassignmentWorkflow, StatusWorkflowEngine


class TestAdminTransitions:
    """Status changes available to a scoped public admin"""

    @pytest.mark.parametrize("current,new", [
        ("submitted", "in_progress"),
        ("submitted", "false_complaint"),
        ("in_progress", "resolved"),
        ("in_progress", "false_complaint"),
    ])
    def test_forward_transitions_allowed(self, current, new):
        assert StatusWorkflowEngine.is_valid_admin_transition(current, new)

    @pytest.mark.parametrize("current,new", [
        ("in_progress", "submitted"),
        ("resolved", "in_progress"),
        ("false_complaint", "submitted"),
        ("submitted", "resolved"),
        ("submitted", "withdrawn"),
        ("withdrawn", "in_progress"),
    ])
    def test_backward_and_skipping_transitions_rejected(self, current, new):
        assert not StatusWorkflowEngine.is_valid_admin_transition(current, new)

    def test_same_status_is_noop_only_while_live(self):
        assert StatusWorkflowEngine.is_valid_admin_transition("in_progress", "in_progress")
        assert not StatusWorkflowEngine.is_valid_admin_transition("resolved", "resolved")

    def test_unknown_status_rejected(self):
        assert not StatusWorkflowEngine.is_valid_admin_transition("closed", "resolved")
        assert StatusWorkflowEngine.get_allowed_transitions("closed") == []

    def test_validate_lists_allowed_targets(self):
        with pytest.raises(ValidationError) as exc:
            StatusWorkflowEngine.validate_admin_transition("submitted", "resolved")
        assert "in_progress" in exc.value.message
        assert exc.value.status_code == 400

    def test_terminal_states(self):
        assert StatusWorkflowEngine.is_terminal("resolved")
        assert StatusWorkflowEngine.is_terminal("false_complaint")
        assert StatusWorkflowEngine.is_terminal("withdrawn")
        assert not StatusWorkflowEngine.is_terminal("submitted")


class TestWithdrawal:

    def test_submitted_can_be_withdrawn(self):
        StatusWorkflowEngine.validate_withdrawal("submitted")

    @pytest.mark.parametrize("current", ["in_progress", "resolved", "false_complaint", "withdrawn"])
    def test_other_states_cannot(self, current):
        with pytest.raises(ValidationError):
            StatusWorkflowEngine.validate_withdrawal(current)

    def test_append_note(self):
        assert StatusWorkflowEngine.append_note("", "first") == "first"
        assert StatusWorkflowEngine.append_note("first", "second") == "first\nsecond"


class TestReassignmentWorkflow:

    def test_pending_can_be_resolved(self):
        ReassignmentWorkflow.validate_resolution("pending", ReassignmentStatus.APPROVED)
        ReassignmentWorkflow.validate_resolution("pending", ReassignmentStatus.REJECTED)

    @pytest.mark.parametrize("current", ["approved", "rejected"])
    def test_resolved_requests_are_immutable(self, current):
        with pytest.raises(ValidationError):
            ReassignmentWorkflow.validate_resolution(current, ReassignmentStatus.APPROVED)

    def test_cannot_move_back_to_pending(self):
        with pytest.raises(ValidationError):
            ReassignmentWorkflow.validate_resolution("pending", ReassignmentStatus.PENDING)
