"""
Unit tests for Telegram keyboard builders.

Tests button payloads and layout.
"""

from aiogram.types import InlineKeyboardMarkup

from articlehub.telegram.keyboards import (
    get_edit_moderation_keyboard,
    get_moderation_keyboard,
    get_premium_keyboard,
    get_questions_keyboard,
    get_stats_keyboard,
    get_users_page_keyboard,
)


def _payloads(keyboard: InlineKeyboardMarkup) -> list[str]:
    return [btn.callback_data for row in keyboard.inline_keyboard for btn in row]


class TestModerationKeyboards:
    """Tests for the article and edit moderation keyboards."""

    def test_moderation_buttons(self):
        keyboard = get_moderation_keyboard("Ab3dE9xZ")

        assert _payloads(keyboard) == ["approve:Ab3dE9xZ", "reject:Ab3dE9xZ"]
        assert len(keyboard.inline_keyboard) == 1

    def test_edit_moderation_buttons(self):
        keyboard = get_edit_moderation_keyboard("Ab3dE9xZ")

        assert _payloads(keyboard) == ["edit_approve:Ab3dE9xZ", "edit_reject:Ab3dE9xZ"]


class TestUsersKeyboards:
    """Tests for user list navigation."""

    def test_stats_opens_first_page(self):
        assert _payloads(get_stats_keyboard()) == ["users:0"]

    def test_first_page_has_only_next(self):
        assert _payloads(get_users_page_keyboard(0, 3)) == ["users:1"]

    def test_middle_page_has_both(self):
        assert _payloads(get_users_page_keyboard(1, 3)) == ["users:0", "users:2"]

    def test_last_page_has_only_back(self):
        assert _payloads(get_users_page_keyboard(2, 3)) == ["users:1"]

    def test_empty_list_has_no_buttons(self):
        assert _payloads(get_users_page_keyboard(0, 0)) == []


class TestPremiumKeyboard:
    def test_regular_user_can_be_granted(self):
        payloads = _payloads(get_premium_keyboard(42, is_premium=False))

        assert payloads == ["premium_grant:42", "premium_extend:42"]

    def test_premium_user_can_be_revoked(self):
        payloads = _payloads(get_premium_keyboard(42, is_premium=True))

        assert payloads == ["premium_revoke:42", "premium_extend:42"]


class TestQuestionsKeyboard:
    def test_payload_uses_id_prefix(self):
        question_id = "0f8fad5b-d9cb-469f-a165-70867728950e"

        keyboard = get_questions_keyboard([(question_id, "How do I publish?")])

        assert _payloads(keyboard) == ["question:0f8fad5b"]

    def test_long_question_text_is_shortened(self):
        keyboard = get_questions_keyboard([("a" * 36, "q" * 100)])

        text = keyboard.inline_keyboard[0][0].text
        assert text.endswith("...")
        assert len(text) < 100
