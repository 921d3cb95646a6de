"""
Unit Tests for Security Module.

Black box tests against the public interface of security.py.
Signatures are computed for real with HMAC-SHA256, nothing is mocked.
"""

import hashlib
import hmac
import json
from urllib.parse import urlencode

import pytest

from articlehub.backend.core.exceptions import AuthenticationError
from articlehub.backend.core.security import (
    TelegramUser,
    build_data_check_string,
    sign_init_data,
    verify_init_data,
)

BOT_TOKEN = "123456:TEST-support-bot-token"
NOW = 1_700_000_000


def _init_data(user: dict | None = None, auth_date: int = NOW, token: str = BOT_TOKEN, **extra) -> str:
    fields = {"auth_date": str(auth_date), **extra}
    if user is not None:
        fields["user"] = json.dumps(user, separators=(",", ":"))
    fields["hash"] = sign_init_data(fields, token)
    return urlencode(fields)


# =============================================================================
# Data-check string
# =============================================================================


class TestBuildDataCheckString:
    """Tests for the string Telegram signs."""

    def test_sorts_pairs_and_joins_with_newlines(self):
        result = build_data_check_string({"user": "u", "auth_date": "1", "query_id": "q"})

        assert result == "auth_date=1\nquery_id=q\nuser=u"

    def test_excludes_hash(self):
        result = build_data_check_string({"auth_date": "1", "hash": "abc"})

        assert result == "auth_date=1"

    def test_signature_is_hex_sha256(self):
        signature = sign_init_data({"auth_date": "1"}, BOT_TOKEN)

        assert len(signature) == 64
        int(signature, 16)

    def test_key_is_derived_with_webappdata(self):
        fields = {"auth_date": "1", "user": '{"id":1}'}
        secret_key = hmac.new(b"WebAppData", BOT_TOKEN.encode(), hashlib.sha256).digest()
        expected = hmac.new(
            secret_key, b'auth_date=1\nuser={"id":1}', hashlib.sha256
        ).hexdigest()

        assert sign_init_data(fields, BOT_TOKEN) == expected


# =============================================================================
# initData verification
# =============================================================================


class TestVerifyInitData:
    """Tests for verify_init_data."""

    def test_valid_data_returns_user(self):
        init_data = _init_data({"id": 42, "first_name": "Ann", "username": "ann"})

        user = verify_init_data(init_data, BOT_TOKEN, max_age_seconds=3600, now=NOW + 10)

        assert user == TelegramUser(id=42, first_name="Ann", username="ann")

    def test_optional_fields_default_to_none(self):
        user = verify_init_data(_init_data({"id": 7}), BOT_TOKEN)

        assert user.id == 7
        assert user.username is None
        assert user.photo_url is None

    def test_extra_fields_are_covered_by_signature(self):
        init_data = _init_data({"id": 1}, query_id="AAH")

        assert verify_init_data(init_data, BOT_TOKEN).id == 1

    def test_wrong_token_is_rejected(self):
        init_data = _init_data({"id": 42}, token="999:OTHER-token")

        with pytest.raises(AuthenticationError):
            verify_init_data(init_data, BOT_TOKEN)

    def test_tampered_user_is_rejected(self):
        init_data = _init_data({"id": 42})
        tampered = init_data.replace("42", "43")

        with pytest.raises(AuthenticationError):
            verify_init_data(tampered, BOT_TOKEN)

    def test_missing_hash_is_rejected(self):
        with pytest.raises(AuthenticationError):
            verify_init_data(urlencode({"auth_date": NOW, "user": '{"id":1}'}), BOT_TOKEN)

    @pytest.mark.parametrize("init_data", ["", "garbage", "hash="])
    def test_garbage_is_rejected(self, init_data):
        with pytest.raises(AuthenticationError):
            verify_init_data(init_data, BOT_TOKEN)

    def test_expired_data_is_rejected(self):
        init_data = _init_data({"id": 42}, auth_date=NOW)

        with pytest.raises(AuthenticationError, match="expired"):
            verify_init_data(init_data, BOT_TOKEN, max_age_seconds=60, now=NOW + 61)

    def test_zero_max_age_disables_expiry(self):
        init_data = _init_data({"id": 42}, auth_date=1)

        assert verify_init_data(init_data, BOT_TOKEN, max_age_seconds=0).id == 42

    def test_missing_user_is_rejected(self):
        with pytest.raises(AuthenticationError):
            verify_init_data(_init_data(user=None), BOT_TOKEN)

    def test_user_without_id_is_rejected(self):
        with pytest.raises(AuthenticationError):
            verify_init_data(_init_data({"first_name": "Ann"}), BOT_TOKEN)
