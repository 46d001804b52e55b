"""
Role Resolver - decides which role governs an authenticated principal.

Policy: profile first. The stored user_role is trusted; a missing profile is
created on first sight with a seeded role. The bootstrap admin email is only
a seed, never a standing authorization rule.
"""

from typing import Optional
import logging

from app.core.settings import settings
from app.models.user import UserRole
from app.services.public_admin_service import get_public_admin_service
from app.services.session import Principal, SessionState
from app.services.user_service import get_user_service

logger = logging.getLogger(__name__)


class RoleResolver:

    def __init__(self, user_service=None, public_admin_service=None, bootstrap_admin_email: Optional[str] = None):
        self.user_service = user_service or get_user_service()
        self.public_admin_service = public_admin_service or get_public_admin_service()
        self.bootstrap_admin_email = (bootstrap_admin_email or settings.BOOTSTRAP_ADMIN_EMAIL or "").strip().lower()

    def seed_role(self, email: str) -> UserRole:
        """Role given to a profile created for the first time."""
        email = (email or "").strip().lower()
        if self.bootstrap_admin_email and email == self.bootstrap_admin_email:
            return UserRole.ADMIN
        if self.public_admin_service.get_active_by_email(email):
            return UserRole.PUBLIC_ADMIN
        return UserRole.CITIZEN

    def resolve(self, principal: Principal) -> SessionState:
        """
        Resolve role and preload profile data.

        Any lookup or write failure yields a state with role None.
        """
        try:
            profile = self.user_service.get_profile(principal.uid)
            if profile is None:
                profile = self.user_service.create_profile_if_absent(
                    uid=principal.uid,
                    email=principal.email,
                    role=self.seed_role(principal.email),
                )

            role = UserRole(profile.get("user_role", UserRole.CITIZEN.value))

            public_admin = None
            if role == UserRole.PUBLIC_ADMIN:
                public_admin = self.public_admin_service.get_active_by_email(principal.email)
                if public_admin is None:
                    logger.warning(f"Public admin {principal.email} has no active scope")

            logger.info(f"Resolved {principal.uid} ({principal.email}) as {role.value}")
            return SessionState(
                principal=principal,
                role=role,
                profile=profile,
                public_admin=public_admin,
            )

        except Exception as e:
            logger.error(f"Role resolution failed for {principal.uid}: {str(e)}", exc_info=True)
            return SessionState(principal=principal)


# Global resolver instance (singleton pattern)
_role_resolver = None


def get_role_resolver() -> RoleResolver:
    global _role_resolver
    if _role_resolver is None:
        _role_resolver = RoleResolver()
    return _role_resolver
