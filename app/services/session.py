"""
Session state and its lifecycle.

A session is empty on creation, replaced wholesale when a principal signs in
(or its token is refreshed / presented) and cleared wholesale on sign-out.
Handlers receive the state through dependencies; nothing is kept in module
globals.
"""

import threading
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel
import logging

from app.models.public_admin import PublicAdmin
from app.models.user import SessionResponse, UserProfile, UserRole

logger = logging.getLogger(__name__)


class Principal(BaseModel):
    """Authenticated identity before role resolution."""
    uid: str
    email: str

    class Config:
        frozen = True


class SessionEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    SIGNED_OUT = "SIGNED_OUT"


class SessionState(BaseModel):
    """
    Everything resolved for one principal.

    role is None while unresolved or after a failed resolution; callers
    must treat that as blocked, never as a default role.
    """
    principal: Optional[Principal] = None
    role: Optional[UserRole] = None
    profile: Optional[Dict] = None
    public_admin: Optional[Dict] = None

    class Config:
        frozen = True

    @property
    def is_resolved(self) -> bool:
        return self.principal is not None and self.role is not None

    @property
    def uid(self) -> Optional[str]:
        return self.principal.uid if self.principal else None

    @property
    def email(self) -> Optional[str]:
        return self.principal.email if self.principal else None

    def to_response(self) -> SessionResponse:
        profile = UserProfile(**self.profile) if self.profile else None
        return SessionResponse(
            uid=self.principal.uid,
            email=self.principal.email,
            role=self.role,
            profile=profile,
            public_admin=PublicAdmin(**self.public_admin) if self.public_admin else None,
            needs_onboarding=profile is None or not profile.name,
        )


EMPTY_SESSION = SessionState()


class SessionManager:
    """
    Applies session-change events to a single session.

    Every event clears the current state before anything else and bumps a
    generation counter. A resolution that completes after a newer event
    has arrived is dropped, so a previous principal's role can never
    reappear.
    """

    def __init__(self, resolver):
        self._resolver = resolver
        self._state = EMPTY_SESSION
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    def handle_event(self, event: SessionEvent, principal: Optional[Principal] = None) -> SessionState:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._state = EMPTY_SESSION

        if event == SessionEvent.SIGNED_OUT or principal is None:
            logger.info(f"Session cleared ({event.value})")
            return EMPTY_SESSION

        resolved = self._resolver.resolve(principal)

        with self._lock:
            if generation != self._generation:
                logger.info(f"Discarding stale resolution for {principal.uid} ({event.value})")
                return self._state
            self._state = resolved

        return resolved
