"""
Admin Keyboard Builders.

Inline keyboards attached to admin-bot messages. Every button carries a
`verb:argument` payload built with pack_action.
"""

from collections.abc import Iterable

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from articlehub.telegram.callbacks.actions import CallbackVerb, pack_action

QUESTION_ID_PREFIX_LENGTH = 8
QUESTION_BUTTON_TEXT_LENGTH = 30


def get_moderation_keyboard(short_id: str) -> InlineKeyboardMarkup:
    """Approve / reject buttons for a new or resubmitted article."""
    builder = InlineKeyboardBuilder()
    builder.button(text="✅ Approve", callback_data=pack_action(CallbackVerb.APPROVE, short_id))
    builder.button(text="❌ Reject", callback_data=pack_action(CallbackVerb.REJECT, short_id))
    builder.adjust(2)
    return builder.as_markup()


def get_edit_moderation_keyboard(short_id: str) -> InlineKeyboardMarkup:
    """Approve / reject buttons for a proposed edit of a published article."""
    builder = InlineKeyboardBuilder()
    builder.button(
        text="✅ Approve edit",
        callback_data=pack_action(CallbackVerb.EDIT_APPROVE, short_id),
    )
    builder.button(
        text="❌ Reject edit",
        callback_data=pack_action(CallbackVerb.EDIT_REJECT, short_id),
    )
    builder.adjust(2)
    return builder.as_markup()


def get_stats_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="👥 Open user list", callback_data=pack_action(CallbackVerb.USERS, 0))
    return builder.as_markup()


def get_users_page_keyboard(page: int, total_pages: int) -> InlineKeyboardMarkup:
    """
    Previous / next buttons for the user list.

    Args:
        page: Current page (0-indexed)
        total_pages: Number of pages; may be 0 for an empty list
    """
    builder = InlineKeyboardBuilder()

    if page > 0:
        builder.button(text="⬅️ Back", callback_data=pack_action(CallbackVerb.USERS, page - 1))
    if page < total_pages - 1:
        builder.button(text="Next ➡️", callback_data=pack_action(CallbackVerb.USERS, page + 1))

    builder.adjust(2)
    return builder.as_markup()


def get_premium_keyboard(telegram_id: int, is_premium: bool) -> InlineKeyboardMarkup:
    """Grant or revoke, plus extend, for one profile card."""
    builder = InlineKeyboardBuilder()

    if is_premium:
        builder.button(
            text="❌ Revoke Premium",
            callback_data=pack_action(CallbackVerb.PREMIUM_REVOKE, telegram_id),
        )
    else:
        builder.button(
            text="👑 Grant Premium",
            callback_data=pack_action(CallbackVerb.PREMIUM_GRANT, telegram_id),
        )
    builder.button(
        text="📅 Extend by 30 days",
        callback_data=pack_action(CallbackVerb.PREMIUM_EXTEND, telegram_id),
    )

    builder.adjust(1)
    return builder.as_markup()


def question_button_text(question: str) -> str:
    if len(question) > QUESTION_BUTTON_TEXT_LENGTH:
        question = question[:QUESTION_BUTTON_TEXT_LENGTH] + "..."
    return f"❓ {question}"


def get_questions_keyboard(questions: Iterable[tuple[str, str]]) -> InlineKeyboardMarkup:
    """
    One button per support question.

    Args:
        questions: (question_id, question_text) pairs
    """
    builder = InlineKeyboardBuilder()
    for question_id, text in questions:
        builder.button(
            text=question_button_text(text),
            callback_data=pack_action(
                CallbackVerb.QUESTION, question_id[:QUESTION_ID_PREFIX_LENGTH]
            ),
        )
    builder.adjust(1)
    return builder.as_markup()
