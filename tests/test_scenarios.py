# tests/test_scenarios.py
"""
End-to-end walks through the report and reassignment workflows.
"""
import pytest

from app.core.errors import AuthorizationError, ValidationError
from app.models.reassignment import ReassignmentCreate
from app.models.report import ReportStatus, StatusUpdateRequest
from tests.conftest import RANCHI_ADMIN_EMAIL, stored_report


def advance(services, session, report_id, status):
    return services.reports.update_status(session, report_id, StatusUpdateRequest(status=ReportStatus(status)))


class TestPotholeInRanchi:

    def test_submitted_to_resolved(self, services, ranchi_admin, dhanbad_admin, pothole, fake_db):
        assert pothole["status"] == "submitted"
        assert pothole["title"] == "Pothole on Main Rd"

        report = advance(services, ranchi_admin, pothole["id"], "in_progress")
        assert report["assigned_admin"] == RANCHI_ADMIN_EMAIL

        report = advance(services, ranchi_admin, pothole["id"], "resolved")
        assert report["status"] == "resolved"

        with pytest.raises(AuthorizationError):
            advance(services, dhanbad_admin, pothole["id"], "false_complaint")
        with pytest.raises(ValidationError):
            advance(services, ranchi_admin, pothole["id"], "in_progress")
        assert stored_report(fake_db, pothole["id"])["status"] == "resolved"

    def test_reassigned_to_dhanbad_water_supply(self, services, ranchi_admin, state_admin, pothole):
        request = services.reassignments.create_request(ranchi_admin, pothole["id"], ReassignmentCreate(
            suggested_district="Dhanbad",
            suggested_category="Water Supply",
            reason="Wrong category",
        ))
        assert request["status"] == "pending"

        result = services.reassignments.approve_request(state_admin, request["id"])

        assert result["request"]["status"] == "approved"
        assert result["report"]["district"] == "Dhanbad"
        assert result["report"]["category"] == "Water Supply"
        assert result["report"]["assigned_admin"] is None

    def test_withdrawal_after_resolution_rejected(self, services, citizen, ranchi_admin, pothole, fake_db):
        advance(services, ranchi_admin, pothole["id"], "in_progress")
        advance(services, ranchi_admin, pothole["id"], "resolved")

        with pytest.raises(ValidationError):
            services.reports.withdraw_report(citizen, pothole["id"], "No longer needed")
        assert stored_report(fake_db, pothole["id"])["status"] == "resolved"

    def test_withdrawn_is_final(self, services, citizen, ranchi_admin, pothole):
        services.reports.withdraw_report(citizen, pothole["id"], "Filed twice")

        with pytest.raises(ValidationError):
            advance(services, ranchi_admin, pothole["id"], "in_progress")
        with pytest.raises(ValidationError):
            services.reports.withdraw_report(citizen, pothole["id"], "Again")
