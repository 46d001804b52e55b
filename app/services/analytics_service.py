"""
Analytics Service - scope analytics for public admins and the state admin dashboard.
"""

from app.core.errors import AuthorizationError
from app.models.report import ReportStatus
from app.models.user import UserRole
from app.services import access_policy
from app.services.public_admin_service import get_public_admin_service
from app.services.reassignment_service import get_reassignment_service
from app.services.report_service import get_report_service
from app.services.session import SessionState
from collections import Counter
from typing import Dict, List
from datetime import datetime, timedelta, timezone
import logging
import math

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24
WEEK = timedelta(days=7)
LATEST_REPORTS_LIMIT = 10


class AnalyticsService:
    """Service for report analytics."""

    def __init__(self, report_service=None, public_admin_service=None, reassignment_service=None):
        self.report_service = report_service or get_report_service()
        self.public_admin_service = public_admin_service or get_public_admin_service()
        self.reassignment_service = reassignment_service or get_reassignment_service()

    def get_scope_analytics(self, session: SessionState, days: int = 30) -> Dict:
        """
        Analytics over the caller's own scope for the last `days` days.

        Returns:
            Dict with totals, average resolution time (days), status
            distribution, weekly trends and the subcategory breakdown
        """
        access_policy.require_role(session, UserRole.PUBLIC_ADMIN)
        if not session.public_admin:
            raise AuthorizationError("No active public admin scope for this account")

        now = datetime.now(timezone.utc)
        since = now - timedelta(days=days)
        reports = self.report_service.list_reports(
            district=session.public_admin["district"],
            category=session.public_admin["category"],
            since=since,
        )

        distribution = self._get_status_distribution(reports)
        return {
            "district": session.public_admin["district"],
            "category": session.public_admin["category"],
            "days": days,
            "total_reports": len(reports),
            "resolved_reports": distribution[ReportStatus.RESOLVED.value],
            "avg_resolution_days": self._average_resolution_days(reports),
            "status_distribution": distribution,
            "weekly_trends": self._weekly_trends(reports, since, now),
            "subcategory_breakdown": self._subcategory_breakdown(reports),
        }

    def get_dashboard(self, session: SessionState) -> Dict:
        """State admin overview with the latest reports."""
        access_policy.require_state_admin(session)

        reports = self.report_service.list_reports()
        return {
            "total_reports": len(reports),
            "status_distribution": self._get_status_distribution(reports),
            "active_public_admins": len(self.public_admin_service.list_public_admins(active_only=True)),
            "pending_reassignments": self.reassignment_service.count_pending(),
            "latest_reports": reports[:LATEST_REPORTS_LIMIT],
        }

    def _get_status_distribution(self, reports: List[Dict]) -> Dict[str, int]:
        distribution = {status.value: 0 for status in ReportStatus}
        for report in reports:
            status = report.get("status")
            if status in distribution:
                distribution[status] += 1
        return distribution

    def _average_resolution_days(self, reports: List[Dict]) -> float:
        """Mean of updated_at - created_at over resolved reports, in days."""
        durations = [
            (report["updated_at"] - report["created_at"]).total_seconds()
            for report in reports
            if report.get("status") == ReportStatus.RESOLVED.value
            and report.get("created_at") and report.get("updated_at")
        ]
        if not durations:
            return 0.0
        return round(sum(durations) / len(durations) / SECONDS_PER_DAY, 2)

    def _weekly_trends(self, reports: List[Dict], since: datetime, now: datetime) -> List[Dict]:
        """
        Report and resolved counts per 7-day bucket, oldest first.

        Buckets start at `since`; the last one is cut off at `now`.
        """
        bucket_count = max(1, math.ceil((now - since) / WEEK))
        trends = []
        for index in range(bucket_count):
            start = since + index * WEEK
            trends.append({
                "period": f"Week {index + 1}",
                "start": start,
                "end": min(start + WEEK, now),
                "reports": 0,
                "resolved": 0,
            })

        for report in reports:
            created_at = report.get("created_at")
            if created_at is None or created_at < since:
                continue
            index = min(int((created_at - since) / WEEK), bucket_count - 1)
            trends[index]["reports"] += 1
            if report.get("status") == ReportStatus.RESOLVED.value:
                trends[index]["resolved"] += 1

        return trends

    def _subcategory_breakdown(self, reports: List[Dict]) -> List[Dict]:
        counts = Counter(report.get("subcategory") or "Unspecified" for report in reports)
        return [
            {"subcategory": subcategory, "count": count}
            for subcategory, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        ]


# Global service instance (singleton pattern)
_analytics_service = None


def get_analytics_service() -> AnalyticsService:
    global _analytics_service
    if _analytics_service is None:
        _analytics_service = AnalyticsService()
    return _analytics_service
