# tests/test_models.py
import pytest
from pydantic import ValidationError

from app.core.constants import CATEGORIES, JHARKHAND_DISTRICTS, SUBCATEGORIES
from app.models.public_admin import PublicAdminCreate, PublicAdminUpdate
from app.models.reassignment import ReassignmentCreate
from app.models.report import ReportCreate
from app.models.user import ProfileUpdate
from tests.conftest import POTHOLE


class TestReferenceData:

    def test_every_district_listed_once(self):
        assert len(JHARKHAND_DISTRICTS) == 24
        assert len(set(JHARKHAND_DISTRICTS)) == 24

    def test_every_category_has_subcategories(self):
        assert set(SUBCATEGORIES) == set(CATEGORIES)
        assert all(SUBCATEGORIES[category] for category in CATEGORIES)


class TestReportCreate:

    def test_valid_report(self):
        report = ReportCreate(**POTHOLE)
        assert report.district == "Ranchi"
        assert report.latitude is None

    def test_text_is_stripped(self):
        report = ReportCreate(**{**POTHOLE, "title": "  Pothole on Main Rd  "})
        assert report.title == "Pothole on Main Rd"

    def test_blank_address_rejected(self):
        with pytest.raises(ValidationError):
            ReportCreate(**{**POTHOLE, "address_line": "   "})

    def test_unknown_district_rejected(self):
        with pytest.raises(ValidationError):
            ReportCreate(**{**POTHOLE, "district": "Patna"})

    def test_subcategory_must_belong_to_category(self):
        with pytest.raises(ValidationError):
            ReportCreate(**{**POTHOLE, "subcategory": "Power Outage"})


class TestPublicAdminModels:

    def test_create_requires_known_scope(self):
        with pytest.raises(ValidationError):
            PublicAdminCreate(email="x@janta.in", district="Ranchi", category="Traffic")

    def test_create_requires_email(self):
        with pytest.raises(ValidationError):
            PublicAdminCreate(email="not-an-email", district="Ranchi", category="Municipal")

    def test_update_needs_a_field(self):
        with pytest.raises(ValidationError):
            PublicAdminUpdate()

    def test_reassignment_needs_reason(self):
        with pytest.raises(ValidationError):
            ReassignmentCreate(suggested_district="Ranchi", suggested_category="Water Supply", reason="")


class TestProfileUpdate:

    def test_name_is_stripped(self):
        assert ProfileUpdate(name="  Asha Kumari ").name == "Asha Kumari"

    def test_whitespace_name_rejected(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(name="   ")

    def test_name_may_be_omitted(self):
        assert ProfileUpdate(phone="9876543210").name is None
