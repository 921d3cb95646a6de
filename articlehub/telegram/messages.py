"""
Message Templates.

HTML texts sent by both bots. User-supplied values are escaped here, so
callers pass raw strings.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from aiogram.utils.text_decorations import html_decoration

from articlehub.backend.core.utils import format_date, truncate

APP_NAME = "ArticleHub"

quote = html_decoration.quote


def _q(value: Any) -> str:
    return quote("" if value is None else str(value))


# =============================================================================
# Callback toasts (plain text)
# =============================================================================

TOAST_ACCESS_DENIED = "⛔ Access denied"
TOAST_ARTICLE_NOT_FOUND = "❌ Article not found"
TOAST_ARTICLE_APPROVED = "✅ Article approved"
TOAST_WRITE_REASON = "📝 Write the rejection reason"
TOAST_ARTICLE_REJECTED = "❌ Article rejected"
TOAST_NO_PENDING_EDIT = "ℹ️ No pending edit"
TOAST_EDIT_APPROVED = "✅ Edit approved"
TOAST_EDIT_REJECTED = "❌ Edit rejected"
TOAST_USER_NOT_FOUND = "❌ User not found"
TOAST_PREMIUM_GRANTED = "✅ Premium granted"
TOAST_PREMIUM_REVOKED = "✅ Premium revoked"
TOAST_PREMIUM_EXTENDED = "✅ Premium extended"
TOAST_QUESTION_NOT_FOUND = "❌ Question not found"
TOAST_FAILED = "❌ Something went wrong"

ACCESS_DENIED = "⛔ Access denied. This bot is for administrators only."
HELP_HINT = "Use /help to see the list of commands."
OPERATION_FAILED = "❌ Something went wrong, please try again."


# =============================================================================
# Moderation
# =============================================================================


def moderation_request(
    title: str,
    author_name: str | None,
    author_username: str | None,
    is_anonymous: bool,
    preview: str | None,
    media_url: str | None,
    media_type: str | None,
) -> str:
    """Text of the approve/reject request posted to the admin chat."""
    author = "Anonymous" if is_anonymous else (author_name or "Unknown")
    handle = f" (@{_q(author_username)})" if author_username else ""

    lines = [
        "🆕 <b>New article awaiting moderation</b>",
        "",
        f"📝 <b>Title:</b> {_q(title)}",
        "",
        f"👤 <b>Author:</b> {_q(author)}{handle}",
        "",
        "📄 <b>Preview:</b>",
        f"{_q(preview or 'No preview')}...",
    ]

    if media_url:
        lines.append("")
        if media_url.startswith("data:"):
            lines.append("🖼 <b>Media:</b> Image (see above)")
        elif media_type == "youtube":
            lines.append(f'🎬 <b>Media:</b> <a href="{_q(media_url)}">YouTube video</a>')
        else:
            lines.append(f"🖼 <b>Media:</b> {_q(truncate(media_url, 50))}")

    return "\n".join(lines)


def edit_moderation_request(
    short_id: str,
    author_label: str,
    changes: Iterable[tuple[str, str, str]],
) -> str:
    """
    Text of the edit approve/reject request.

    Args:
        short_id: Article short id
        author_label: `@username` or first name
        changes: (label, old, new) triples, already shortened
    """
    lines = [
        "✏️ <b>Article edit</b>",
        "",
        f"🆔 Code: <code>{_q(short_id)}</code>",
        f"👤 Author: {_q(author_label)}",
        "",
        "<b>📝 Changes:</b>",
        "",
    ]
    for label, old, new in changes:
        lines.append(f"<b>{label}:</b>")
        lines.append(f"<s>{_q(old)}</s>")
        lines.append(f"➡️ {_q(new)}")
        lines.append("")
    return "\n".join(lines).rstrip()


def article_approved(title: str) -> str:
    return (
        "✅ <b>Your article has been approved!</b>\n\n"
        f'📝 "{_q(title)}"\n\n'
        f"It is now published and visible to everyone in {APP_NAME}."
    )


def article_rejected(title: str, reason: str) -> str:
    return (
        "❌ <b>Your article has been rejected</b>\n\n"
        f'📝 "{_q(title)}"\n\n'
        f"<b>Reason:</b> {_q(reason)}\n\n"
        "You can fix the article and send it for moderation again."
    )


def edit_approved(title: str) -> str:
    return (
        "✅ <b>Your changes have been approved!</b>\n\n"
        f'📝 "{_q(title)}"\n\n'
        "The updated article is now live."
    )


def edit_rejected(title: str) -> str:
    return (
        "❌ <b>Your changes have been rejected</b>\n\n"
        f'📝 "{_q(title)}"\n\n'
        "The published version stays as it was."
    )


def admin_article_approved(title: str) -> str:
    return f'✅ Article "{_q(title)}" approved and published'


def admin_reason_prompt() -> str:
    return "📝 <b>Give the rejection reason:</b>\n\nSend the reason as your next message."


def admin_article_rejected(title: str, reason: str) -> str:
    return f'❌ Article "{_q(title)}" rejected\n\n<b>Reason:</b> {_q(reason)}'


def admin_edit_approved(title: str) -> str:
    return f'✅ Edit of "{_q(title)}" approved'


def admin_edit_rejected(title: str) -> str:
    return f'❌ Edit of "{_q(title)}" rejected'


def pending_header(count: int) -> str:
    return f"📝 <b>Articles awaiting moderation ({count}):</b>\n\nPress a button to moderate:"


def pending_article_card(
    title: str,
    author_name: str | None,
    author_username: str | None,
    preview: str | None,
    created_at: datetime,
) -> str:
    handle = f" (@{_q(author_username)})" if author_username else ""
    return (
        f"📄 <b>{_q(title)}</b>\n\n"
        f"👤 Author: {_q(author_name or 'Unknown')}{handle}\n\n"
        f"📝 {_q(truncate(preview or 'No preview', 150, suffix=''))}...\n\n"
        f"🕐 {created_at.strftime('%d.%m.%Y %H:%M')}"
    )


NO_PENDING_ARTICLES = "✨ No articles awaiting moderation"


# =============================================================================
# Support
# =============================================================================

SUPPORT_GREETING = (
    f"👋 <b>Welcome to {APP_NAME} support!</b>\n\n"
    "Send your question as a message and our team will reply here."
)
SUPPORT_QUESTION_RECEIVED = "✅ Your question has been sent to support. We will reply here soon."
NO_PENDING_QUESTIONS = "✨ No support questions"


def support_question_alert(question: str, user_name: str | None, user_telegram_id: int) -> str:
    return (
        "❓ <b>New support question</b>\n\n"
        f"👤 <b>From:</b> {_q(user_name or 'User')} ({user_telegram_id})\n\n"
        f"📝 {_q(truncate(question, 200))}"
    )


def questions_header(count: int) -> str:
    return (
        f"❓ <b>Support questions ({count}):</b>\n\n"
        "<i>Press a question to open it. Reply to the opened question message "
        "to answer.</i>"
    )


def support_question_card(
    question_id: str,
    question: str,
    user_name: str | None,
    user_username: str | None,
    user_telegram_id: int,
    created_at: datetime,
) -> str:
    handle = f" (@{_q(user_username)})" if user_username else ""
    return (
        f"❓ <b>Question #{_q(question_id[:8])}</b>\n\n"
        f"👤 <b>From:</b> {_q(user_name or 'User')}{handle}\n"
        f"🆔 <b>Telegram ID:</b> {user_telegram_id}\n\n"
        "📝 <b>Question:</b>\n"
        f"{_q(question)}\n\n"
        f"🕐 {created_at.strftime('%d.%m.%Y %H:%M')}\n\n"
        "<i>To answer, reply to this message.</i>"
    )


def support_answer(question: str, answer: str) -> str:
    return (
        f"💬 <b>Reply from {APP_NAME} support</b>\n\n"
        "<b>Your question:</b>\n"
        f"{_q(question)}\n\n"
        "<b>Answer:</b>\n"
        f"{_q(answer)}\n\n"
        "<i>If you have more questions, just send another message.</i>"
    )


ADMIN_ANSWER_SENT = "✅ Answer sent to the user"


# =============================================================================
# Admin commands
# =============================================================================

ADMIN_HELP = (
    f"🔐 <b>{APP_NAME} Admin Bot</b>\n\n"
    "<b>Available commands:</b>\n\n"
    "📊 /stats: project statistics\n"
    "👥 /users: user list\n"
    "🔍 /search: find a user by username or ID\n"
    "👑 /premium: premium subscriptions\n"
    "📝 /pending: articles awaiting moderation\n"
    "❓ /questions: support questions\n"
    "📢 /broadcast: message every user\n"
    "❓ /help: this help\n\n"
    "<i>New articles and questions arrive here automatically.</i>"
)


def stats(users: int, premium: int, counts: dict[str, int]) -> str:
    total = sum(counts.values())
    return (
        f"📊 <b>{APP_NAME} statistics</b>\n\n"
        f"👥 <b>Users:</b> {users}\n"
        f"👑 <b>Premium:</b> {premium}\n\n"
        "📝 <b>Articles:</b>\n"
        f"├ Total: {total}\n"
        f"├ ⏳ Pending: {counts.get('pending', 0)}\n"
        f"├ ✅ Published: {counts.get('approved', 0)}\n"
        f"└ ❌ Rejected: {counts.get('rejected', 0)}"
    )


def users_page(
    rows: Iterable[tuple[bool, str | None, str | None, int | None, int]],
    total: int,
    page: int,
    total_pages: int,
) -> str:
    """
    Args:
        rows: (is_premium, first_name, username, telegram_id, reputation)
    """
    lines = [
        f"👥 <b>Users</b> ({total})",
        f"📄 Page {page + 1}/{total_pages or 1}",
        "",
    ]
    rows = list(rows)
    if not rows:
        lines.append("<i>No users</i>")
    for is_premium, first_name, username, telegram_id, reputation in rows:
        crown = "👑 " if is_premium else ""
        handle = f" @{_q(username)}" if username else ""
        lines.append(f"{crown}<b>{_q(first_name or 'No name')}</b>{handle}")
        lines.append(f"   🆔 {telegram_id or 'N/A'} | ⭐ {reputation or 0}")
    lines.append("")
    lines.append("🔍 To search: <code>/search username</code> or <code>/search ID</code>")
    return "\n".join(lines)


SEARCH_USAGE = (
    "🔍 <b>User search</b>\n\n"
    "Use:\n"
    "<code>/search username</code> to search by username\n"
    "<code>/search 123456789</code> to search by Telegram ID"
)


def search_not_found(query: str) -> str:
    return f'🔍 User "<b>{_q(query)}</b>" not found'


def profile_card(
    first_name: str | None,
    last_name: str | None,
    username: str | None,
    telegram_id: int | None,
    reputation: int,
    is_premium: bool,
    premium_expires_at: datetime | None,
    created_at: datetime,
) -> str:
    status = "👑 Premium" if is_premium else "👤 Regular"
    expiry = f"\n📅 Premium until: {format_date(premium_expires_at)}" if premium_expires_at else ""
    return (
        "👤 <b>User profile</b>\n\n"
        f"📛 <b>Name:</b> {_q(first_name or '')} {_q(last_name or '')}\n"
        f"🔗 <b>Username:</b> {'@' + _q(username) if username else 'Not set'}\n"
        f"🆔 <b>Telegram ID:</b> {telegram_id}\n"
        f"⭐ <b>Reputation:</b> {reputation or 0}\n"
        f"📊 <b>Status:</b> {status}{expiry}\n"
        f"📅 <b>Registered:</b> {format_date(created_at)}"
    )


def premium_overview(
    total: int,
    rows: Iterable[tuple[str | None, str | None, datetime | None]],
) -> str:
    """
    Args:
        rows: (first_name, username, premium_expires_at), soonest expiry first
    """
    lines = [
        "👑 <b>Premium management</b>",
        "",
        f"Premium users: <b>{total}</b>",
        "",
        "<b>Commands:</b>",
        "• /search [username/ID] to find a user",
        "• Use the buttons on the user card",
        "",
        "<b>Premium users:</b>",
    ]
    rows = list(rows)
    if not rows:
        lines.append("")
        lines.append("<i>No premium users yet</i>")
    for first_name, username, expires_at in rows:
        handle = f" @{_q(username)}" if username else ""
        lines.append("")
        lines.append(f"👑 <b>{_q(first_name or 'No name')}</b>{handle}")
        lines.append(f"   📅 Until: {format_date(expires_at)}")
    return "\n".join(lines)


def premium_granted_user(expires_at: datetime) -> str:
    return (
        "🎉 <b>Congratulations!</b>\n\n"
        "You have been granted a 30-day Premium subscription!\n\n"
        f"Active until: {format_date(expires_at)}"
    )


def premium_revoked_user() -> str:
    return (
        "ℹ️ <b>Notice</b>\n\n"
        "Your Premium subscription has been cancelled.\n\n"
        f"You can subscribe again in the {APP_NAME} app."
    )


def premium_extended_user(expires_at: datetime) -> str:
    return (
        "🎉 <b>Premium extended!</b>\n\n"
        "Your subscription has been extended by 30 days.\n"
        f"New expiry date: {format_date(expires_at)}"
    )


def admin_premium_granted(telegram_id: int, expires_at: datetime) -> str:
    return f"✅ Premium granted to {telegram_id} until {format_date(expires_at)}"


def admin_premium_revoked(telegram_id: int) -> str:
    return f"❌ Premium revoked from {telegram_id}"


def admin_premium_extended(telegram_id: int, expires_at: datetime) -> str:
    return f"✅ Premium for {telegram_id} extended until {format_date(expires_at)}"


BROADCAST_USAGE = (
    "📢 <b>Broadcast</b>\n\n"
    "To message every user, use:\n\n"
    "<code>/broadcast Message text</code>"
)
BROADCAST_NO_RECIPIENTS = "❌ No users to broadcast to"


def broadcast_started(count: int) -> str:
    return f"📤 Sending the message to {count} users..."


def broadcast_message(text: str) -> str:
    return f"📢 <b>Announcement from {APP_NAME}</b>\n\n{_q(text)}"


def broadcast_finished(sent: int, failed: int) -> str:
    return (
        "✅ <b>Broadcast finished</b>\n\n"
        f"📤 Sent: {sent}\n"
        f"❌ Not delivered: {failed}"
    )
