# tests/test_analytics_service.py
from datetime import datetime, timedelta, timezone

import pytest

from app.core.constants import REPORTS
from app.core.errors import AuthorizationError
from tests.conftest import POTHOLE


def put_report(fake_db, report_id, status, created_days_ago, resolved_days_ago=None, **overrides):
    now = datetime.now(timezone.utc)
    created_at = now - timedelta(days=created_days_ago)
    updated_at = now - timedelta(days=resolved_days_ago) if resolved_days_ago is not None else created_at
    fake_db.put(REPORTS, report_id, {
        **POTHOLE,
        "user_id": "citizen-1",
        "status": status,
        "created_at": created_at,
        "updated_at": updated_at,
        **overrides,
    })


class TestScopeAnalytics:

    def test_counts_and_resolution_time(self, services, ranchi_admin, fake_db):
        put_report(fake_db, "r1", "resolved", created_days_ago=4, resolved_days_ago=2)
        put_report(fake_db, "r2", "resolved", created_days_ago=3, resolved_days_ago=2)
        put_report(fake_db, "r3", "in_progress", created_days_ago=1)
        put_report(fake_db, "r4", "submitted", created_days_ago=0)
        put_report(fake_db, "old", "resolved", created_days_ago=60, resolved_days_ago=50)
        put_report(fake_db, "elsewhere", "resolved", created_days_ago=5, resolved_days_ago=1, district="Dhanbad")

        analytics = services.analytics.get_scope_analytics(ranchi_admin, days=30)

        assert analytics["district"] == "Ranchi"
        assert analytics["total_reports"] == 4
        assert analytics["resolved_reports"] == 2
        assert analytics["avg_resolution_days"] == pytest.approx(1.5, abs=0.01)
        assert analytics["status_distribution"] == {
            "submitted": 1,
            "in_progress": 1,
            "resolved": 2,
            "false_complaint": 0,
            "withdrawn": 0,
        }

    def test_no_resolved_reports(self, services, ranchi_admin):
        analytics = services.analytics.get_scope_analytics(ranchi_admin)
        assert analytics["total_reports"] == 0
        assert analytics["avg_resolution_days"] == 0.0
        assert analytics["subcategory_breakdown"] == []
        assert sum(t["reports"] for t in analytics["weekly_trends"]) == 0

    def test_requires_public_admin(self, services, citizen):
        with pytest.raises(AuthorizationError):
            services.analytics.get_scope_analytics(citizen)

    def test_weekly_trends_and_subcategories(self, services, ranchi_admin, fake_db):
        put_report(fake_db, "r1", "resolved", created_days_ago=4, resolved_days_ago=2)
        put_report(fake_db, "r2", "submitted", created_days_ago=3, subcategory="Broken Streetlight")
        put_report(fake_db, "r3", "in_progress", created_days_ago=1)
        put_report(fake_db, "r4", "resolved", created_days_ago=20, resolved_days_ago=18)

        analytics = services.analytics.get_scope_analytics(ranchi_admin, days=30)

        trends = analytics["weekly_trends"]
        assert [t["period"] for t in trends] == ["Week 1", "Week 2", "Week 3", "Week 4", "Week 5"]
        assert [t["reports"] for t in trends] == [0, 1, 0, 2, 1]
        assert [t["resolved"] for t in trends] == [0, 1, 0, 1, 0]
        assert trends[0]["start"] < trends[0]["end"] <= trends[1]["start"]
        assert analytics["subcategory_breakdown"] == [
            {"subcategory": "Pothole", "count": 3},
            {"subcategory": "Broken Streetlight", "count": 1},
        ]

    def test_short_range_has_one_bucket(self, services, ranchi_admin, fake_db):
        put_report(fake_db, "r1", "submitted", created_days_ago=0)

        trends = services.analytics.get_scope_analytics(ranchi_admin, days=3)["weekly_trends"]

        assert len(trends) == 1
        assert trends[0]["reports"] == 1


class TestDashboard:

    def test_overview(self, services, state_admin, ranchi_admin, dhanbad_admin, fake_db):
        put_report(fake_db, "r1", "submitted", created_days_ago=1)
        put_report(fake_db, "r2", "withdrawn", created_days_ago=2)

        dashboard = services.analytics.get_dashboard(state_admin)

        assert dashboard["total_reports"] == 2
        assert dashboard["status_distribution"]["withdrawn"] == 1
        assert dashboard["active_public_admins"] == 2
        assert dashboard["pending_reassignments"] == 0

    def test_latest_reports(self, services, state_admin, fake_db):
        for day in range(12):
            put_report(fake_db, f"r{day}", "submitted", created_days_ago=day)

        latest = services.analytics.get_dashboard(state_admin)["latest_reports"]

        assert [report["id"] for report in latest] == [f"r{day}" for day in range(10)]

    def test_requires_state_admin(self, services, ranchi_admin):
        with pytest.raises(AuthorizationError):
            services.analytics.get_dashboard(ranchi_admin)
