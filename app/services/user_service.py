"""
User Service - Manage user profiles in Firestore.
"""

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists
from app.config.firebase import get_db
from app.core.constants import USER_PROFILES
from app.core.errors import NotFoundError, ValidationError
from app.models.user import UserRole
from app.utils.firestore_helpers import doc_to_dict, where_filter
from typing import Optional, Dict
import logging

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user profiles. Documents are keyed by the Firebase uid, so a
    principal can never own two profiles.
    """

    def __init__(self, db=None):
        self.db = db or get_db()

    def get_profile(self, uid: str) -> Optional[Dict]:
        """
        Get a profile by uid.

        Returns:
            Profile dict or None if not found
        """
        doc = self.db.collection(USER_PROFILES).document(uid).get()
        return doc_to_dict(doc)

    def get_profile_by_email(self, email: str) -> Optional[Dict]:
        users_ref = self.db.collection(USER_PROFILES)
        query = where_filter(users_ref, "email", "==", email.strip().lower()).limit(1)

        for doc in query.stream():
            return doc_to_dict(doc)
        return None

    def create_profile_if_absent(self, uid: str, email: str, role: UserRole) -> Dict:
        """
        Create the profile for a first-time principal.

        create() fails when the document exists, so of two concurrent
        creators only one writes; the loser re-fetches the winner's profile.

        Returns:
            The stored profile
        """
        user_ref = self.db.collection(USER_PROFILES).document(uid)
        profile_data = {
            "email": email.strip().lower(),
            "name": "",
            "phone": None,
            "user_role": role.value,
            "created_at": firestore.SERVER_TIMESTAMP,
            "updated_at": firestore.SERVER_TIMESTAMP,
        }

        try:
            user_ref.create(profile_data)
            logger.info(f"Profile created: {uid} as {role.value}")
        except AlreadyExists:
            logger.info(f"Profile {uid} already exists, re-fetching")

        profile = doc_to_dict(user_ref.get())
        if profile is None:
            raise NotFoundError(f"Profile {uid} vanished after creation")
        return profile

    def update_profile(self, uid: str, name: Optional[str] = None, phone: Optional[str] = None) -> Dict:
        """
        Update the owner-editable fields (name, phone).

        Returns:
            Updated profile dictionary
        """
        update_data = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be blank")
            update_data["name"] = name.strip()
        if phone is not None:
            update_data["phone"] = phone.strip() or None

        if not update_data:
            raise ValidationError("Nothing to update")

        user_ref = self.db.collection(USER_PROFILES).document(uid)
        if not user_ref.get().exists:
            raise NotFoundError(f"Profile {uid} not found")

        update_data["updated_at"] = firestore.SERVER_TIMESTAMP
        user_ref.update(update_data)

        logger.info(f"Profile updated: {uid} ({', '.join(k for k in update_data if k != 'updated_at')})")
        return doc_to_dict(user_ref.get())

    def set_role_by_email(self, email: str, role: UserRole) -> Optional[Dict]:
        """
        Role assignment side effect used when a state admin authorizes a
        public admin. Profiles that do not exist yet get their role seeded
        on first sign-in instead.
        """
        profile = self.get_profile_by_email(email)
        if profile is None:
            return None

        if profile.get("user_role") == UserRole.ADMIN.value:
            logger.warning(f"Not downgrading state admin {email} to {role.value}")
            return profile

        user_ref = self.db.collection(USER_PROFILES).document(profile["id"])
        user_ref.update({"user_role": role.value, "updated_at": firestore.SERVER_TIMESTAMP})
        logger.info(f"Profile {profile['id']} role set to {role.value}")
        return doc_to_dict(user_ref.get())


# Global service instance (singleton pattern)
_user_service = None


def get_user_service() -> UserService:
    """
    Get or create UserService singleton instance.

    Returns:
        UserService: The global user service instance
    """
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
