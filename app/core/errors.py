"""
Error taxonomy for JANTA.

Services raise these; routes translate them into HTTP responses.
Nothing here is retried automatically - every failure needs the user
to act again.
"""

from fastapi import status


class JantaError(Exception):
    """Base class for all expected application failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(JantaError):
    """Bad credentials, invalid/expired token, duplicate sign-up."""

    status_code = status.HTTP_401_UNAUTHORIZED


class DuplicateAccountError(AuthenticationError):
    status_code = status.HTTP_409_CONFLICT


class AuthorizationError(JantaError):
    """The caller's role or scope does not permit this read/write."""

    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(JantaError):
    """Invalid input or an illegal state transition."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(JantaError):
    status_code = status.HTTP_404_NOT_FOUND


class RoleUnresolvedError(JantaError):
    """
    Role resolution failed for an authenticated principal.

    The caller must show a blocked/loading state instead of falling back
    to any role.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class BackendError(JantaError):
    """A remote call to Firebase (auth, Firestore, Storage) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
