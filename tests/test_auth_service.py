# tests/test_auth_service.py
from unittest.mock import MagicMock

import pytest
import requests

from app.core.errors import AuthenticationError, BackendError, DuplicateAccountError
from app.core.settings import settings
from app.services import auth_service as auth_module
from app.services.auth_service import AuthService


def response(status_code, payload):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = b"{}"
    resp.json.return_value = payload
    return resp


SIGN_IN_OK = {
    "localId": "citizen-1",
    "email": "Asha@Mail.in",
    "idToken": "id-token",
    "refreshToken": "refresh-token",
    "expiresIn": "3600",
}


@pytest.fixture
def post(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(auth_module.requests, "post", mock)
    return mock


class TestPasswordSignIn:

    def test_sign_in_returns_tokens(self, post):
        post.return_value = response(200, SIGN_IN_OK)

        tokens = AuthService(api_key="key").sign_in("asha@mail.in", "secret1")

        assert tokens == {
            "uid": "citizen-1",
            "email": "asha@mail.in",
            "id_token": "id-token",
            "refresh_token": "refresh-token",
            "expires_in": 3600,
        }
        assert post.call_args.kwargs["params"] == {"key": "key"}
        assert post.call_args.kwargs["json"]["returnSecureToken"] is True

    @pytest.mark.parametrize("code", ["INVALID_LOGIN_CREDENTIALS", "EMAIL_NOT_FOUND", "INVALID_PASSWORD"])
    def test_bad_credentials(self, post, code):
        post.return_value = response(400, {"error": {"message": code}})
        with pytest.raises(AuthenticationError) as exc:
            AuthService(api_key="key").sign_in("asha@mail.in", "wrong")
        assert exc.value.message == "Invalid email or password"

    def test_other_rejections_keep_the_code(self, post):
        post.return_value = response(400, {"error": {"message": "TOO_MANY_ATTEMPTS_TRY_LATER : Try again later."}})
        with pytest.raises(AuthenticationError) as exc:
            AuthService(api_key="key").sign_in("asha@mail.in", "wrong")
        assert exc.value.message == "TOO_MANY_ATTEMPTS_TRY_LATER"

    def test_network_failure(self, post):
        post.side_effect = requests.ConnectionError("offline")
        with pytest.raises(BackendError):
            AuthService(api_key="key").sign_in("asha@mail.in", "secret1")

    @pytest.mark.parametrize("status_code", [200, 503])
    def test_non_json_body(self, post, status_code):
        resp = response(status_code, None)
        resp.content = b"<html>Service Unavailable</html>"
        resp.json.side_effect = ValueError("Expecting value")
        post.return_value = resp

        with pytest.raises(BackendError):
            AuthService(api_key="key").sign_in("asha@mail.in", "secret1")

    def test_missing_api_key(self, post, monkeypatch):
        monkeypatch.setattr(settings, "FIREBASE_WEB_API_KEY", None)
        with pytest.raises(BackendError):
            AuthService(api_key=None).sign_in("asha@mail.in", "secret1")
        post.assert_not_called()

    def test_refresh(self, post):
        post.return_value = response(200, {
            "user_id": "citizen-1", "id_token": "new-id", "refresh_token": "new-refresh", "expires_in": "3600",
        })
        tokens = AuthService(api_key="key").refresh("refresh-token")
        assert tokens["id_token"] == "new-id"
        assert post.call_args.kwargs["data"]["grant_type"] == "refresh_token"


class TestAdminSdk:

    @pytest.fixture(autouse=True)
    def no_firebase_app(self, monkeypatch):
        monkeypatch.setattr(auth_module, "initialize_firebase", lambda: None)

    def test_sign_up_duplicate_email(self, post, monkeypatch):
        def create_user(**kwargs):
            raise auth_module.auth.EmailAlreadyExistsError("exists", None, None)

        monkeypatch.setattr(auth_module.auth, "create_user", create_user)
        with pytest.raises(DuplicateAccountError) as exc:
            AuthService(api_key="key").sign_up("asha@mail.in", "secret1")
        assert exc.value.status_code == 409
        post.assert_not_called()

    def test_sign_up_signs_in(self, post, monkeypatch):
        monkeypatch.setattr(auth_module.auth, "create_user", MagicMock(return_value=MagicMock(uid="citizen-1")))
        post.return_value = response(200, SIGN_IN_OK)

        assert AuthService(api_key="key").sign_up("asha@mail.in", "secret1")["uid"] == "citizen-1"

    def test_verify_token_lowercases_email(self, id_tokens):
        id_tokens["good"] = {"uid": "citizen-1", "email": "Asha@Mail.in"}
        principal = AuthService(api_key="key").verify_token("good")
        assert principal.uid == "citizen-1"
        assert principal.email == "asha@mail.in"

    def test_verify_token_rejects_unknown(self, id_tokens):
        with pytest.raises(AuthenticationError):
            AuthService(api_key="key").verify_token("forged")

    def test_verify_token_requires_email(self, id_tokens):
        id_tokens["phone-only"] = {"uid": "u9"}
        with pytest.raises(AuthenticationError):
            AuthService(api_key="key").verify_token("phone-only")

    def test_sign_out_revokes(self, monkeypatch):
        revoke = MagicMock()
        monkeypatch.setattr(auth_module.auth, "revoke_refresh_tokens", revoke)
        AuthService(api_key="key").sign_out("citizen-1")
        revoke.assert_called_once_with("citizen-1")
