"""
Moderation Service.

The article decision flow driven by admin-bot buttons.

    pending --approve--> approved
    pending --reject (two phases)--> rejected
    rejected --approve--> approved

Rejecting takes two steps. The button only opens a PendingRejection for the
pressing admin and asks for a reason; the admin's next free-text message
completes it. If an admin opens several, the most recent one wins.

Edits of published articles have their own decisions: approving copies the
pending edit onto the live fields, rejecting drops it.

Each step commits before its side effects run. A failed notification is
logged by the notifier and never undoes a committed decision.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import NotFoundError
from articlehub.backend.core.utils import make_preview
from articlehub.backend.models.article import EDITABLE_FIELDS, Article, ArticleStatus
from articlehub.backend.models.moderation import ModerationAction
from articlehub.backend.repositories.article import ArticleRepository
from articlehub.backend.repositories.moderation import (
    ModerationLogRepository,
    PendingRejectionRepository,
)
from articlehub.backend.services.base import BaseService
from articlehub.backend.services.short_ids import ShortIdRegistry
from articlehub.telegram import messages
from articlehub.telegram.services.notifications import NotificationDispatcher


@dataclass(frozen=True)
class ButtonPress:
    """Who pressed a moderation button, and on which message."""

    admin_id: int
    chat_id: int
    message_id: int


PENDING_QUEUE_LIMIT = 10


@dataclass(frozen=True)
class ModerationOutcome:
    toast: str
    article_id: str | None = None
    changed: bool = True


@dataclass
class PendingCard:
    """A pending article as listed by /pending."""

    article_id: str
    title: str
    author_name: str | None
    author_username: str | None
    preview: str | None
    created_at: datetime
    short_id: str = ""


class ModerationService(BaseService):
    def __init__(self, session: AsyncSession, notifier: NotificationDispatcher) -> None:
        super().__init__(session)
        self.notifier = notifier
        self.registry = ShortIdRegistry(session)
        self.article_repo = ArticleRepository(session)
        self.pending_repo = PendingRejectionRepository(session)
        self.log_repo = ModerationLogRepository(session)

    async def _resolve_article(self, short_id: str) -> Article:
        """
        Raises:
            NotFoundError: Unknown token or missing article
            DatabaseError: Store unavailable
        """
        article_id = await self.registry.resolve(short_id)
        if article_id is None:
            self._logger.warning("Unknown short id", extra={"short_id": short_id})
            raise NotFoundError(messages.TOAST_ARTICLE_NOT_FOUND)

        article = await self._execute_db_operation(
            "load article", self.article_repo.get_by_id_or_none(article_id)
        )
        if article is None:
            raise NotFoundError(messages.TOAST_ARTICLE_NOT_FOUND)
        return article

    async def _notify_author(self, article: Article, text: str) -> None:
        author = article.author
        if author is not None and author.telegram_id:
            await self.notifier.notify_author(author.telegram_id, text)

    async def approve(self, short_id: str, press: ButtonPress) -> ModerationOutcome:
        """Publish an article. Approving an approved article is harmless."""
        article = await self._resolve_article(short_id)

        article.status = ArticleStatus.APPROVED
        article.rejection_reason = None
        await self._commit("approve article")

        await self._execute_db_operation(
            "log approval",
            self.log_repo.append(article.id, press.admin_id, ModerationAction.APPROVED),
        )
        await self._commit("log approval")

        self._log_operation("Article approved", article_id=article.id, moderator=press.admin_id)

        await self._notify_author(article, messages.article_approved(article.title))
        await self.notifier.strip_keyboard(press.chat_id, press.message_id)
        await self.notifier.notify_admin_channel(
            messages.admin_article_approved(article.title), chat_id=press.chat_id
        )
        return ModerationOutcome(toast=messages.TOAST_ARTICLE_APPROVED, article_id=article.id)

    async def open_rejection(self, short_id: str, press: ButtonPress) -> ModerationOutcome:
        """First reject phase: remember the admin is about to give a reason."""
        article = await self._resolve_article(short_id)

        await self._execute_db_operation(
            "open rejection",
            self.pending_repo.create(
                admin_telegram_id=press.admin_id,
                article_id=article.id,
                short_id=short_id,
            ),
        )
        await self._commit("open rejection")

        self._log_operation("Rejection opened", article_id=article.id, moderator=press.admin_id)

        await self.notifier.strip_keyboard(press.chat_id, press.message_id)
        await self.notifier.notify_admin_channel(
            messages.admin_reason_prompt(), chat_id=press.chat_id
        )
        return ModerationOutcome(
            toast=messages.TOAST_WRITE_REASON, article_id=article.id, changed=False
        )

    async def complete_rejection(
        self,
        admin_id: int,
        reason: str,
        chat_id: int,
    ) -> ModerationOutcome | None:
        """
        Second reject phase: use `reason` for the admin's latest open rejection.

        Returns:
            None when the admin has no open rejection (the text is not consumed)
        """
        pending = await self._execute_db_operation(
            "find open rejection", self.pending_repo.get_latest_for_admin(admin_id)
        )
        if pending is None:
            return None

        article_id = pending.article_id
        article = await self._execute_db_operation(
            "load article", self.article_repo.get_by_id_or_none(article_id)
        )
        if article is None:
            await self._execute_db_operation(
                "drop orphan rejection", self.pending_repo.delete_for_article(article_id)
            )
            await self._commit("drop orphan rejection")
            raise NotFoundError(messages.TOAST_ARTICLE_NOT_FOUND)

        article.status = ArticleStatus.REJECTED
        article.rejection_reason = reason
        await self._commit("reject article")

        await self._execute_db_operation(
            "log rejection",
            self.log_repo.append(article_id, admin_id, ModerationAction.REJECTED, reason),
        )
        await self._commit("log rejection")

        self._log_operation("Article rejected", article_id=article_id, moderator=admin_id)

        await self._notify_author(article, messages.article_rejected(article.title, reason))

        await self._execute_db_operation(
            "close rejections", self.pending_repo.delete_for_article(article_id)
        )
        await self._commit("close rejections")

        await self.notifier.notify_admin_channel(
            messages.admin_article_rejected(article.title, reason), chat_id=chat_id
        )
        return ModerationOutcome(toast=messages.TOAST_ARTICLE_REJECTED, article_id=article_id)

    async def approve_edit(self, short_id: str, press: ButtonPress) -> ModerationOutcome:
        """Apply the pending edit to the live article."""
        article = await self._resolve_article(short_id)
        pending_edit = article.pending_edit
        if not pending_edit:
            return ModerationOutcome(
                toast=messages.TOAST_NO_PENDING_EDIT, article_id=article.id, changed=False
            )

        for field_name in EDITABLE_FIELDS:
            if field_name in pending_edit:
                setattr(article, field_name, pending_edit[field_name])
        article.preview = make_preview(pending_edit.get("preview"), article.body)
        article.pending_edit = None
        await self._commit("approve edit")

        self._log_operation("Edit approved", article_id=article.id, moderator=press.admin_id)

        await self._notify_author(article, messages.edit_approved(article.title))
        await self.notifier.strip_keyboard(press.chat_id, press.message_id)
        await self.notifier.notify_admin_channel(
            messages.admin_edit_approved(article.title), chat_id=press.chat_id
        )
        return ModerationOutcome(toast=messages.TOAST_EDIT_APPROVED, article_id=article.id)

    async def reject_edit(self, short_id: str, press: ButtonPress) -> ModerationOutcome:
        """Drop the pending edit; live fields stay as they are."""
        article = await self._resolve_article(short_id)
        if not article.pending_edit:
            return ModerationOutcome(
                toast=messages.TOAST_NO_PENDING_EDIT, article_id=article.id, changed=False
            )

        article.pending_edit = None
        await self._commit("reject edit")

        self._log_operation("Edit rejected", article_id=article.id, moderator=press.admin_id)

        await self._notify_author(article, messages.edit_rejected(article.title))
        await self.notifier.strip_keyboard(press.chat_id, press.message_id)
        await self.notifier.notify_admin_channel(
            messages.admin_edit_rejected(article.title), chat_id=press.chat_id
        )
        return ModerationOutcome(toast=messages.TOAST_EDIT_REJECTED, article_id=article.id)

    async def pending_queue(self, limit: int = PENDING_QUEUE_LIMIT) -> list[PendingCard]:
        """The latest pending articles, each with its moderation token."""
        articles = await self._execute_db_operation(
            "list pending articles", self.article_repo.get_latest_pending(limit)
        )
        # Snapshot first: a registry rollback expires every loaded row
        cards = [
            PendingCard(
                article_id=article.id,
                title=article.title,
                author_name=article.author.display_name if article.author else None,
                author_username=article.author.username if article.author else None,
                preview=article.preview,
                created_at=article.created_at,
            )
            for article in articles
        ]
        for card in cards:
            card.short_id = await self.registry.get_or_create(card.article_id)
        return cards
