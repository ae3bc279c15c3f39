# =============================================================================
# tests/test_auth.py - Token Verification and Moderator Checks
# =============================================================================

import inspect
import time
import uuid
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from app.auth import AuthUser, decode_user, ensure_admin
from app.auth import dependencies as auth_deps


def _token(secret, **claims):
    payload = {
        "sub": str(uuid.uuid4()),
        "aud": "authenticated",
        "exp": int(time.time()) + 600,
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


class TestDecodeUser:
    """Tests for decode_user with HS256 tokens."""

    def test_regular_user(self, settings):
        user = decode_user(_token(settings.SUPABASE_JWT_SECRET, email="a@b.co"), settings)

        assert user.email == "a@b.co"
        assert user.is_admin is False

    def test_admin_by_email_is_case_insensitive(self, settings):
        token = _token(settings.SUPABASE_JWT_SECRET, email="MOD@Directory.test")
        assert decode_user(token, settings).is_admin is True

    def test_admin_by_role_claim(self, settings):
        token = _token(settings.SUPABASE_JWT_SECRET, email="x@y.z", app_metadata={"role": "admin"})

        user = decode_user(token, settings)

        assert user.is_admin is True
        assert user.role == "admin"

    def test_wrong_secret(self, settings):
        token = _token("some-other-secret-of-decent-length", email="a@b.co")

        with pytest.raises(HTTPException) as exc_info:
            decode_user(token, settings)

        assert exc_info.value.status_code == 401

    def test_expired(self, settings):
        token = _token(settings.SUPABASE_JWT_SECRET, exp=int(time.time()) - 60)

        with pytest.raises(HTTPException) as exc_info:
            decode_user(token, settings)

        assert exc_info.value.detail == "Token has expired"

    def test_wrong_audience(self, settings):
        token = _token(settings.SUPABASE_JWT_SECRET, aud="anon")
        with pytest.raises(HTTPException):
            decode_user(token, settings)

    def test_malformed_subject(self, settings):
        token = _token(settings.SUPABASE_JWT_SECRET, sub="not-a-uuid")

        with pytest.raises(HTTPException) as exc_info:
            decode_user(token, settings)

        assert "user ID" in exc_info.value.detail

    def test_hs256_without_secret(self, settings):
        unconfigured = settings.model_copy(update={"SUPABASE_JWT_SECRET": ""})
        token = _token(settings.SUPABASE_JWT_SECRET)

        with pytest.raises(HTTPException):
            decode_user(token, unconfigured)


class TestJwks:
    """Asymmetric tokens look up their key by kid."""

    def test_unknown_kid_is_rejected(self, settings):
        token = _token(settings.SUPABASE_JWT_SECRET)
        header = {"alg": "ES256", "kid": "missing"}

        with patch.object(auth_deps.jwt, "get_unverified_header", return_value=header), \
                patch.object(auth_deps, "_fetch_jwks", return_value=[{"kid": "other"}]):
            with pytest.raises(HTTPException) as exc_info:
                decode_user(token, settings)

        assert exc_info.value.status_code == 401

    def test_jwks_cached(self, settings, monkeypatch):
        monkeypatch.setitem(auth_deps._jwks_cache, "keys", [])
        monkeypatch.setitem(auth_deps._jwks_cache, "fetched_at", 0.0)
        response = MagicMock()
        response.json.return_value = {"keys": [{"kid": "k1"}]}

        with patch.object(auth_deps.httpx, "get", return_value=response) as get:
            assert auth_deps._fetch_jwks(settings) == [{"kid": "k1"}]
            assert auth_deps._fetch_jwks(settings) == [{"kid": "k1"}]

        get.assert_called_once()
        assert get.call_args.args[0].endswith("/auth/v1/.well-known/jwks.json")


class TestEnsureAdmin:
    """Tests for ensure_admin."""

    def test_anonymous(self):
        with pytest.raises(HTTPException) as exc_info:
            ensure_admin(None)
        assert exc_info.value.status_code == 401

    def test_non_admin(self):
        with pytest.raises(HTTPException) as exc_info:
            ensure_admin(AuthUser(id=uuid.uuid4(), email="a@b.co"))
        assert exc_info.value.status_code == 403

    def test_admin(self):
        user = AuthUser(id=uuid.uuid4(), email="mod@directory.test", is_admin=True)
        assert ensure_admin(user) is user
        assert user.moderator_label == "mod@directory.test"


class TestDependencies:
    """Token dependencies run in the threadpool, not on the event loop."""

    @pytest.mark.parametrize("dependency", [
        auth_deps.get_current_user,
        auth_deps.get_current_user_optional,
        auth_deps.require_admin,
    ])
    def test_dependencies_are_sync(self, dependency):
        assert not inspect.iscoroutinefunction(dependency)

    def test_optional_user_without_credentials(self, settings):
        assert auth_deps.get_current_user_optional(None, settings) is None

    def test_optional_user_with_bad_token(self, settings):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="not-a-jwt")
        assert auth_deps.get_current_user_optional(credentials, settings) is None
