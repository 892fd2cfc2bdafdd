"""
Tests for password hashing, tokens and admin elevation helpers.
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from taskboard_api import auth
from taskboard_core.config import ApiConfig
from taskboard_core.exceptions import UnauthorizedError


class TestPasswords:
    def test_hash_is_salted(self):
        first = auth.hash_password("hunter2")
        second = auth.hash_password("hunter2")
        assert first != second
        assert auth.verify_password("hunter2", first)
        assert not auth.verify_password("hunter3", first)


class TestTokens:
    def test_round_trip(self):
        assert auth.decode_token(auth.create_token("user-1")) == "user-1"

    def test_seven_day_lifetime(self):
        issued = datetime(2030, 1, 1, tzinfo=timezone.utc)
        token = auth.create_token("user-1", now=issued)
        claims = jwt.decode(token, options={"verify_signature": False})
        assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())

    def test_expired(self):
        token = auth.create_token("user-1", now=datetime.now(timezone.utc) - timedelta(days=7, seconds=5))
        with pytest.raises(UnauthorizedError):
            auth.decode_token(token)

    def test_wrong_signature(self):
        forged = jwt.encode({"id": "user-1"}, "another-secret", algorithm="HS256")
        with pytest.raises(UnauthorizedError, match="token failed"):
            auth.decode_token(forged)

    def test_missing_user_id(self):
        token = jwt.encode({"sub": "x"}, "test-jwt-secret", algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            auth.decode_token(token)


class TestInviteToken:
    def test_matching_token_is_admin(self):
        assert auth.role_for_invite("test-admin-invite") == "admin"

    @pytest.mark.parametrize("token", [None, "", "wrong"])
    def test_other_tokens_are_member(self, token):
        assert auth.role_for_invite(token) == "member"

    def test_no_server_secret_never_elevates(self):
        auth.init_auth(ApiConfig(jwt_secret="s", admin_invite_token=None))
        assert auth.role_for_invite("anything") == "member"


class TestSecretBootstrap:
    def test_generated_secret_is_persisted(self, tmp_path, monkeypatch):
        monkeypatch.setattr(auth, "_REPO_ROOT", tmp_path)
        monkeypatch.delenv("JWT_SECRET", raising=False)
        (tmp_path / ".env").write_text("OTHER=1\n")

        auth.init_auth(ApiConfig(jwt_secret=""))

        content = (tmp_path / ".env").read_text()
        assert content.startswith("OTHER=1\n")
        assert f"JWT_SECRET={auth._jwt_secret}\n" in content
        assert len(auth._jwt_secret) > 40
