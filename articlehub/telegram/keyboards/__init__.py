"""
Keyboard Builders.

Inline keyboards for the admin bot. Use builders for cleaner keyboard
construction:

    builder = InlineKeyboardBuilder()
    builder.button(text="Click", callback_data=pack_action(CallbackVerb.USERS, 0))
    keyboard = builder.as_markup()
"""

from articlehub.telegram.keyboards.common import (
    get_edit_moderation_keyboard,
    get_moderation_keyboard,
    get_premium_keyboard,
    get_questions_keyboard,
    get_stats_keyboard,
    get_users_page_keyboard,
)

__all__ = [
    "get_edit_moderation_keyboard",
    "get_moderation_keyboard",
    "get_premium_keyboard",
    "get_questions_keyboard",
    "get_stats_keyboard",
    "get_users_page_keyboard",
]
