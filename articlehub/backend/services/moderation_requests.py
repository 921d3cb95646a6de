"""
Moderation Requests.

Renders the admin-chat messages that ask a moderator to decide on a new
article or on a proposed edit, and records where they were posted.
"""

import base64
import binascii
import re

from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.models.article import Article
from articlehub.backend.repositories.article import ArticleRepository
from articlehub.backend.services.base import BaseService
from articlehub.backend.services.short_ids import ShortIdRegistry
from articlehub.telegram import messages
from articlehub.telegram.keyboards import get_edit_moderation_keyboard, get_moderation_keyboard
from articlehub.telegram.services.notifications import NotificationDispatcher, NotificationResult

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[^;]+);base64,(?P<data>.+)$", re.DOTALL)

EDIT_BODY_PREVIEW_LENGTH = 100


def decode_data_uri(value: str | None) -> bytes | None:
    """Bytes of a base64 data URI, or None if the value is not one."""
    if not value:
        return None
    match = DATA_URI_PATTERN.match(value)
    if match is None:
        return None
    try:
        return base64.b64decode(match.group("data"), validate=False)
    except (binascii.Error, ValueError):
        return None


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def describe_edit_changes(article: Article, pending_edit: dict) -> list[tuple[str, str, str]]:
    """(label, old, new) for the title, body and anonymity changes in an edit."""
    changes: list[tuple[str, str, str]] = []

    new_title = pending_edit.get("title", article.title)
    if new_title != article.title:
        changes.append(("Title", article.title, new_title))

    new_body = pending_edit.get("body", article.body)
    if new_body != article.body:
        changes.append((
            "Text (preview)",
            f"{(article.body or '')[:EDIT_BODY_PREVIEW_LENGTH]}...",
            f"{(new_body or '')[:EDIT_BODY_PREVIEW_LENGTH]}...",
        ))

    new_anonymous = pending_edit.get("is_anonymous", article.is_anonymous)
    if new_anonymous != article.is_anonymous:
        changes.append(("Anonymity", _yes_no(article.is_anonymous), _yes_no(new_anonymous)))

    return changes


class ModerationRequestService(BaseService):
    def __init__(self, session: AsyncSession, notifier: NotificationDispatcher) -> None:
        super().__init__(session)
        self.notifier = notifier
        self.article_repo = ArticleRepository(session)
        self.registry = ShortIdRegistry(session)

    async def send_article_request(self, article_id: str) -> NotificationResult:
        """
        Post the approve/reject request for an article to the admin chat.

        A base64 image is sent as a photo with the request as its caption.
        The posted message id is stored on the article.
        """
        short_id = await self.registry.get_or_create(article_id)
        article = await self._execute_db_operation(
            "load article for moderation request", self.article_repo.get_by_id(article_id)
        )
        author = article.author

        text = messages.moderation_request(
            title=article.title,
            author_name=author.first_name if author else None,
            author_username=author.username if author else None,
            is_anonymous=article.is_anonymous,
            preview=article.preview,
            media_url=article.media_url,
            media_type=article.media_type,
        )
        keyboard = get_moderation_keyboard(short_id)

        photo = decode_data_uri(article.media_url)
        if photo is not None:
            result = await self.notifier.send_admin_photo(photo, text, reply_markup=keyboard)
        else:
            result = await self.notifier.notify_admin_channel(text, reply_markup=keyboard)

        if result.success and result.message_id is not None:
            article.telegram_message_id = result.message_id
            await self._commit("store moderation message id")

        self._log_operation(
            "Moderation request sent",
            article_id=article_id,
            short_id=short_id,
            delivered=result.success,
        )
        return result

    async def send_edit_request(self, article_id: str) -> NotificationResult | None:
        """
        Post the approve/reject request for an article's pending edit.

        Returns None when the article has no pending edit.
        """
        short_id = await self.registry.get_or_create(article_id)
        article = await self._execute_db_operation(
            "load article for edit request", self.article_repo.get_by_id(article_id)
        )
        if not article.pending_edit:
            return None

        author = article.author
        if author is not None and author.username:
            author_label = f"@{author.username}"
        else:
            author_label = (author.first_name if author else None) or "Anonymous"

        text = messages.edit_moderation_request(
            short_id=short_id,
            author_label=author_label,
            changes=describe_edit_changes(article, article.pending_edit),
        )
        result = await self.notifier.notify_admin_channel(
            text, reply_markup=get_edit_moderation_keyboard(short_id)
        )

        self._log_operation(
            "Edit moderation request sent",
            article_id=article_id,
            short_id=short_id,
            delivered=result.success,
        )
        return result
