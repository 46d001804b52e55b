"""
Auth Service - email/password principals on Firebase Authentication.

Account creation, token verification and revocation go through the Admin
SDK. Password sign-in and token refresh are client operations, so they use
the Identity Toolkit / Secure Token REST endpoints with the web API key.
"""

from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError
from app.config.firebase import initialize_firebase
from app.core.errors import AuthenticationError, BackendError, DuplicateAccountError
from app.core.settings import settings
from app.services.session import Principal
from typing import Dict, Optional
import requests
import logging

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
REFRESH_URL = "https://securetoken.googleapis.com/v1/token"

# Identity Toolkit error codes that mean "wrong credentials"
CREDENTIAL_ERRORS = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_EMAIL",
    "USER_DISABLED",
    "TOKEN_EXPIRED",
    "INVALID_REFRESH_TOKEN",
    "USER_NOT_FOUND",
}


class AuthService:

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key or settings.FIREBASE_WEB_API_KEY
        self.timeout = timeout or settings.AUTH_TIMEOUT_SECONDS

    def _post(self, url: str, **kwargs) -> Dict:
        if not self.api_key:
            raise BackendError("FIREBASE_WEB_API_KEY is not configured")

        try:
            resp = requests.post(url, params={"key": self.api_key}, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Auth request to {url} failed: {e}")
            raise BackendError(f"Authentication service unreachable: {e}")

        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            logger.error(f"Unreadable auth response from {url}: {resp.status_code}")
            raise BackendError(f"Authentication service returned an unreadable response ({resp.status_code})")

        if resp.status_code != 200:
            code = (data.get("error") or {}).get("message", "")
            # Codes may carry a suffix: "TOO_MANY_ATTEMPTS_TRY_LATER : ..."
            code = code.split(" ")[0]
            logger.warning(f"Auth request rejected: {resp.status_code} {code}")
            if code in CREDENTIAL_ERRORS:
                raise AuthenticationError("Invalid email or password")
            raise AuthenticationError(code or "Authentication failed")

        return data

    def sign_up(self, email: str, password: str) -> Dict:
        """
        Create an account and sign it in.

        Raises:
            DuplicateAccountError: If the email is already registered
        """
        initialize_firebase()
        try:
            user = auth.create_user(email=email, password=password)
        except auth.EmailAlreadyExistsError:
            raise DuplicateAccountError(f"An account already exists for {email}")
        except ValueError as e:
            raise AuthenticationError(str(e))
        except FirebaseError as e:
            logger.error(f"Firebase create_user failed: {e}", exc_info=True)
            raise BackendError(f"Failed to create account: {e}")

        logger.info(f"Account created: {user.uid} ({email})")
        return self.sign_in(email, password)

    def sign_in(self, email: str, password: str) -> Dict:
        """
        Returns:
            Dict with uid, email, id_token, refresh_token, expires_in
        """
        data = self._post(SIGN_IN_URL, json={
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        logger.info(f"Signed in: {data.get('localId')}")
        return {
            "uid": data["localId"],
            "email": data.get("email", email).lower(),
            "id_token": data["idToken"],
            "refresh_token": data["refreshToken"],
            "expires_in": int(data.get("expiresIn", 3600)),
        }

    def refresh(self, refresh_token: str) -> Dict:
        data = self._post(REFRESH_URL, data={
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        })
        return {
            "uid": data["user_id"],
            "id_token": data["id_token"],
            "refresh_token": data["refresh_token"],
            "expires_in": int(data.get("expires_in", 3600)),
        }

    def verify_token(self, id_token: str) -> Principal:
        """
        Verify an ID token (including revocation) and return its principal.

        Raises:
            AuthenticationError: Invalid, expired, revoked token or disabled user
        """
        initialize_firebase()
        try:
            claims = auth.verify_id_token(id_token, check_revoked=True)
        except (auth.InvalidIdTokenError, auth.UserDisabledError) as e:
            raise AuthenticationError(f"Invalid session: {e}")
        except ValueError as e:
            raise AuthenticationError(f"Invalid session: {e}")
        except auth.CertificateFetchError as e:
            raise BackendError(f"Could not verify session: {e}")

        email = claims.get("email")
        if not email:
            raise AuthenticationError("Account has no email address")

        return Principal(uid=claims["uid"], email=email.lower())

    def sign_out(self, uid: str) -> None:
        """Revoke every refresh token of the principal."""
        initialize_firebase()
        try:
            auth.revoke_refresh_tokens(uid)
        except FirebaseError as e:
            logger.error(f"Failed to revoke tokens for {uid}: {e}")
            raise BackendError(f"Sign-out failed: {e}")
        logger.info(f"Signed out: {uid}")


# Global service instance (singleton pattern)
_auth_service = None


def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
