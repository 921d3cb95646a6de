"""
Unit Tests for pure service helpers.

Media type inference, data URI decoding, edit change descriptions,
premium expiry arithmetic and short id minting.
"""

import base64
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from articlehub.backend.services.article import infer_media_type
from articlehub.backend.services.moderation_requests import decode_data_uri, describe_edit_changes
from articlehub.backend.services.profile import PREMIUM_PERIOD, extended_expiry
from articlehub.backend.services.short_ids import (
    SHORT_ID_ALPHABET,
    SHORT_ID_LENGTH,
    degraded_short_id,
    mint_short_id,
)


class TestInferMediaType:
    @pytest.mark.parametrize(
        "url",
        ["https://www.youtube.com/watch?v=abc", "https://youtu.be/abc"],
    )
    def test_youtube_links(self, url):
        assert infer_media_type(url, None) == "youtube"

    def test_other_links_are_images(self):
        assert infer_media_type("https://cdn.example.com/cat.png", None) == "image"

    def test_explicit_type_wins(self):
        assert infer_media_type("https://youtu.be/abc", "image") == "image"

    def test_no_media(self):
        assert infer_media_type(None, None) is None
        assert infer_media_type("", None) is None


class TestDecodeDataUri:
    def test_decodes_base64_payload(self):
        payload = base64.b64encode(b"\x89PNG\r\n").decode()

        assert decode_data_uri(f"data:image/png;base64,{payload}") == b"\x89PNG\r\n"

    @pytest.mark.parametrize(
        "value",
        [None, "", "https://example.com/cat.png", "data:image/png,notbase64"],
    )
    def test_non_data_uris(self, value):
        assert decode_data_uri(value) is None


class TestDescribeEditChanges:
    """Only fields that actually change are listed."""

    @pytest.fixture
    def article(self):
        return SimpleNamespace(title="Old title", body="Old body", is_anonymous=False)

    def test_title_change(self, article):
        changes = describe_edit_changes(article, {"title": "New title"})

        assert changes == [("Title", "Old title", "New title")]

    def test_body_change_is_previewed(self, article):
        changes = describe_edit_changes(article, {"body": "b" * 300})

        label, old, new = changes[0]
        assert label == "Text (preview)"
        assert old == "Old body..."
        assert new == "b" * 100 + "..."

    def test_anonymity_change(self, article):
        changes = describe_edit_changes(article, {"is_anonymous": True})

        assert changes == [("Anonymity", "No", "Yes")]

    def test_unchanged_values_are_omitted(self, article):
        pending = {"title": "Old title", "body": "Old body", "is_anonymous": False}

        assert describe_edit_changes(article, pending) == []


class TestExtendedExpiry:
    NOW = datetime(2024, 1, 1, 12, 0)

    def test_no_current_expiry_starts_now(self):
        assert extended_expiry(None, self.NOW) == self.NOW + PREMIUM_PERIOD

    def test_active_premium_is_extended_from_expiry(self):
        current = self.NOW + timedelta(days=10)

        assert extended_expiry(current, self.NOW) == current + PREMIUM_PERIOD

    def test_lapsed_premium_starts_now(self):
        current = self.NOW - timedelta(days=10)

        assert extended_expiry(current, self.NOW) == self.NOW + PREMIUM_PERIOD

    def test_period_is_thirty_days(self):
        assert PREMIUM_PERIOD == timedelta(days=30)


class TestShortIdMinting:
    def test_token_shape(self):
        token = mint_short_id()

        assert len(token) == SHORT_ID_LENGTH == 8
        assert set(token) <= set(SHORT_ID_ALPHABET)

    def test_degraded_token_is_id_prefix(self):
        assert degraded_short_id("0f8fad5b-d9cb-469f-a165-70867728950e") == "0f8fad5b"
