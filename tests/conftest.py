# tests/conftest.py
"""
Shared fixtures: in-memory Firestore and Storage, wired-up services and
resolved sessions for each role.
"""
import asyncio
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.config import firebase as firebase_config
from app.core.constants import REPORTS
from app.models.public_admin import PublicAdminCreate
from app.models.report import ReportCreate
from app.services import analytics_service as analytics_module
from app.services import auth_service as auth_module
from app.services import public_admin_service as public_admin_module
from app.services import reassignment_service as reassignment_module
from app.services import report_service as report_module
from app.services import role_resolver as resolver_module
from app.services import storage_service as storage_module
from app.services import user_service as user_module
from app.services.analytics_service import AnalyticsService
from app.services.auth_service import AuthService
from app.services.public_admin_service import PublicAdminService
from app.services.reassignment_service import ReassignmentService
from app.services.report_service import ReportService
from app.services.role_resolver import RoleResolver
from app.services.session import Principal
from app.services.storage_service import ImageFile, StorageService
from app.services.user_service import UserService
from app.utils import firestore_helpers
from tests.fake_firestore import FakeBucket, FakeFirestore, run_transaction

STATE_ADMIN_EMAIL = "state.admin@janta.in"
RANCHI_ADMIN_EMAIL = "ranchi.municipal@janta.in"
DHANBAD_ADMIN_EMAIL = "dhanbad.municipal@janta.in"

POTHOLE = {
    "title": "Pothole on Main Rd",
    "description": "Deep pothole near the bus stop",
    "category": "Municipal",
    "subcategory": "Pothole",
    "district": "Ranchi",
    "sector_number": "4",
    "address_line": "Main Rd, near Kutchery Chowk",
}


@pytest.fixture
def fake_db(monkeypatch):
    """Empty Firestore for each test"""
    db = FakeFirestore()
    monkeypatch.setattr(firebase_config, "db", db)
    monkeypatch.setattr(firestore_helpers, "run_transaction", run_transaction)
    return db


@pytest.fixture
def bucket(monkeypatch):
    fake_bucket = FakeBucket()
    monkeypatch.setattr(firebase_config, "bucket", fake_bucket)
    return fake_bucket


@pytest.fixture
def services(fake_db, bucket, monkeypatch):
    """Services bound to the fakes, also installed as the module singletons"""
    users = UserService(db=fake_db)
    public_admins = PublicAdminService(db=fake_db, user_service=users)
    storage = StorageService(bucket=bucket)
    reports = ReportService(db=fake_db, storage=storage)
    reassignments = ReassignmentService(db=fake_db)
    analytics = AnalyticsService(reports, public_admins, reassignments)
    resolver = RoleResolver(users, public_admins, bootstrap_admin_email=STATE_ADMIN_EMAIL)
    auth = AuthService(api_key="test-web-api-key", timeout=1.0)

    monkeypatch.setattr(user_module, "_user_service", users)
    monkeypatch.setattr(public_admin_module, "_public_admin_service", public_admins)
    monkeypatch.setattr(storage_module, "_storage_service", storage)
    monkeypatch.setattr(report_module, "_report_service", reports)
    monkeypatch.setattr(reassignment_module, "_reassignment_service", reassignments)
    monkeypatch.setattr(analytics_module, "_analytics_service", analytics)
    monkeypatch.setattr(resolver_module, "_role_resolver", resolver)
    monkeypatch.setattr(auth_module, "_auth_service", auth)
    monkeypatch.setattr(auth_module, "initialize_firebase", lambda: None)

    return SimpleNamespace(
        users=users,
        public_admins=public_admins,
        storage=storage,
        reports=reports,
        reassignments=reassignments,
        analytics=analytics,
        resolver=resolver,
        auth=auth,
    )


@pytest.fixture
def id_tokens(monkeypatch):
    """Maps ID token -> claims; anything else fails verification"""
    registry = {}

    def verify_id_token(id_token, check_revoked=False):
        if id_token not in registry:
            raise auth_module.auth.InvalidIdTokenError("Unknown token")
        return registry[id_token]

    monkeypatch.setattr(auth_module.auth, "verify_id_token", verify_id_token)
    return registry


@pytest.fixture
def client(services, id_tokens):
    from app.main import app
    return TestClient(app)


@pytest.fixture
def bearer(id_tokens):
    """bearer(uid, email) -> Authorization header for that principal"""
    def _bearer(uid, email):
        token = f"token-{uid}"
        id_tokens[token] = {"uid": uid, "email": email}
        return {"Authorization": f"Bearer {token}"}
    return _bearer


def resolve(services, uid, email):
    return services.resolver.resolve(Principal(uid=uid, email=email))


@pytest.fixture
def citizen(services):
    return resolve(services, "citizen-1", "asha@mail.in")


@pytest.fixture
def other_citizen(services):
    return resolve(services, "citizen-2", "ravi@mail.in")


@pytest.fixture
def ranchi_admin(services):
    services.public_admins.add_public_admin(
        PublicAdminCreate(email=RANCHI_ADMIN_EMAIL, district="Ranchi", category="Municipal")
    )
    return resolve(services, "pa-ranchi", RANCHI_ADMIN_EMAIL)


@pytest.fixture
def dhanbad_admin(services):
    services.public_admins.add_public_admin(
        PublicAdminCreate(email=DHANBAD_ADMIN_EMAIL, district="Dhanbad", category="Municipal")
    )
    return resolve(services, "pa-dhanbad", DHANBAD_ADMIN_EMAIL)


@pytest.fixture
def state_admin(services):
    return resolve(services, "admin-1", STATE_ADMIN_EMAIL)


def file_report(services, session, images=None, **overrides):
    """Create a report through the service, synchronously"""
    data = {**POTHOLE, **overrides}
    return asyncio.run(services.reports.create_report(session, ReportCreate(**data), images or []))


def jpeg(name="pothole.jpg"):
    return ImageFile(filename=name, content=b"\xff\xd8\xff\xe0fake-jpeg", content_type="image/jpeg")


@pytest.fixture
def pothole(services, citizen):
    return file_report(services, citizen)


def stored_report(fake_db, report_id):
    return fake_db.store[REPORTS][report_id]
