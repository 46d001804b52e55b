"""
Public Admin Service - state admin management of public admin accounts.

A row authorizes one email for one (district, category) scope. Rows are
never deleted; is_active=False revokes access and keeps history.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.constants import PUBLIC_ADMINS
from app.core.errors import NotFoundError, ValidationError
from app.models.public_admin import PublicAdminCreate, PublicAdminUpdate
from app.models.user import UserRole
from app.services.user_service import get_user_service
from app.utils.firestore_helpers import doc_to_dict, sort_newest_first, where_filter
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class PublicAdminService:

    def __init__(self, db=None, user_service=None):
        self.db = db or get_db()
        self.user_service = user_service or get_user_service()

    def get(self, admin_id: str) -> Optional[Dict]:
        return doc_to_dict(self.db.collection(PUBLIC_ADMINS).document(admin_id).get())

    def get_active_by_email(self, email: str) -> Optional[Dict]:
        """Active public admin row for this email, or None."""
        admins_ref = self.db.collection(PUBLIC_ADMINS)
        query = where_filter(admins_ref, "email", "==", email.strip().lower())
        query = where_filter(query, "is_active", "==", True).limit(1)

        for doc in query.stream():
            return doc_to_dict(doc)
        return None

    def list_public_admins(self, active_only: bool = False) -> List[Dict]:
        query = self.db.collection(PUBLIC_ADMINS)
        if active_only:
            query = where_filter(query, "is_active", "==", True)

        admins = [doc_to_dict(doc) for doc in query.stream()]
        return sort_newest_first(admins)

    def add_public_admin(self, request: PublicAdminCreate) -> Dict:
        """
        Authorize a new public admin.

        Raises:
            ValidationError: If the email already has an active scope
        """
        email = request.email.strip().lower()
        if self.get_active_by_email(email):
            raise ValidationError(f"{email} is already an active public admin")

        doc_ref = self.db.collection(PUBLIC_ADMINS).document()
        doc_ref.set({
            "email": email,
            "district": request.district,
            "category": request.category,
            "is_active": True,
            "created_at": firestore.SERVER_TIMESTAMP,
            "updated_at": firestore.SERVER_TIMESTAMP,
        })

        self.user_service.set_role_by_email(email, UserRole.PUBLIC_ADMIN)

        logger.info(f"Public admin added: {email} for ({request.district}, {request.category})")
        return doc_to_dict(doc_ref.get())

    def update_public_admin(self, admin_id: str, request: PublicAdminUpdate) -> Dict:
        """
        Edit scope and/or activation.

        Raises:
            NotFoundError: If the row does not exist
            ValidationError: If reactivating would give the email two active scopes
        """
        doc_ref = self.db.collection(PUBLIC_ADMINS).document(admin_id)
        current = doc_to_dict(doc_ref.get())
        if current is None:
            raise NotFoundError(f"Public admin {admin_id} not found")

        update_data = {}
        if request.district is not None:
            update_data["district"] = request.district
        if request.category is not None:
            update_data["category"] = request.category
        if request.is_active is not None:
            if request.is_active and not current.get("is_active"):
                other = self.get_active_by_email(current["email"])
                if other and other["id"] != admin_id:
                    raise ValidationError(f"{current['email']} already has an active scope")
            update_data["is_active"] = request.is_active

        update_data["updated_at"] = firestore.SERVER_TIMESTAMP
        doc_ref.update(update_data)

        logger.info(f"Public admin {admin_id} updated: {sorted(k for k in update_data if k != 'updated_at')}")
        return doc_to_dict(doc_ref.get())

    def toggle_active(self, admin_id: str) -> Dict:
        current = self.get(admin_id)
        if current is None:
            raise NotFoundError(f"Public admin {admin_id} not found")
        return self.update_public_admin(admin_id, PublicAdminUpdate(is_active=not current.get("is_active", False)))


# Global service instance (singleton pattern)
_public_admin_service = None


def get_public_admin_service() -> PublicAdminService:
    global _public_admin_service
    if _public_admin_service is None:
        _public_admin_service = PublicAdminService()
    return _public_admin_service
