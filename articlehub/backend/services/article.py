"""
Article Service.

Article ingestion from the Mini App. New articles always start as pending
and are announced to the admin chat. Edits of published articles are held
in `pending_edit` until a moderator decides; edits of pending or rejected
articles replace the content and resubmit it.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import AuthorizationError, NotFoundError
from articlehub.backend.core.security import TelegramUser
from articlehub.backend.core.utils import make_preview
from articlehub.backend.models.article import EDITABLE_FIELDS, Article, ArticleStatus, MediaType
from articlehub.backend.repositories.article import ArticleRepository
from articlehub.backend.schemas.article import ArticleFields
from articlehub.backend.services.base import BaseService
from articlehub.backend.services.moderation_requests import ModerationRequestService
from articlehub.backend.services.profile import ProfileService
from articlehub.telegram.services.notifications import NotificationDispatcher

YOUTUBE_HOSTS = ("youtube.com", "youtu.be")


def infer_media_type(media_url: str | None, media_type: MediaType | str | None) -> str | None:
    """Explicit type wins; otherwise YouTube links are `youtube` and anything else `image`."""
    if media_type:
        return MediaType(media_type).value
    if not media_url:
        return None
    if any(host in media_url for host in YOUTUBE_HOSTS):
        return MediaType.YOUTUBE.value
    return MediaType.IMAGE.value


def content_values(fields: ArticleFields) -> dict[str, Any]:
    """The editable values of a submission, with media type resolved."""
    return {
        "title": fields.title,
        "body": fields.body,
        "preview": fields.preview,
        "media_url": fields.media_url or None,
        "media_type": infer_media_type(fields.media_url, fields.media_type),
        "category_id": fields.category_id or None,
        "is_anonymous": fields.is_anonymous,
    }


class ArticleService(BaseService):
    def __init__(self, session: AsyncSession, notifier: NotificationDispatcher) -> None:
        super().__init__(session)
        self.notifier = notifier
        self.article_repo = ArticleRepository(session)
        self.profiles = ProfileService(session)
        self.requests = ModerationRequestService(session, notifier)

    async def submit(self, user: TelegramUser, fields: ArticleFields) -> Article:
        """Create a pending article for the caller and ask for moderation."""
        profile = await self.profiles.upsert_from_telegram(user)

        values = content_values(fields)
        values["preview"] = make_preview(fields.preview, fields.body)

        article = await self._execute_db_operation(
            "create article",
            self.article_repo.create(
                author_id=profile.id,
                allow_comments=fields.allow_comments,
                status=ArticleStatus.PENDING,
                **values,
            ),
        )
        await self._commit("create article")
        article_id = article.id

        self._log_operation("Article submitted", article_id=article_id, author_id=profile.id)

        await self.requests.send_article_request(article_id)
        return await self._reload(article_id)

    async def edit(self, user: TelegramUser, article_id: str, fields: ArticleFields) -> Article:
        """
        Apply an author's edit.

        Raises:
            NotFoundError: Unknown profile or article
            AuthorizationError: The caller is not the author
        """
        profile = await self.profiles.get_by_telegram_id(user.id)
        article = await self._execute_db_operation(
            "load article", self.article_repo.get_by_id_or_none(article_id)
        )
        if article is None:
            raise NotFoundError("Article not found")
        if article.author_id != profile.id:
            raise AuthorizationError("Only the author can edit this article")

        values = content_values(fields)

        if article.status == ArticleStatus.APPROVED:
            article.pending_edit = {name: values[name] for name in EDITABLE_FIELDS}
            await self._commit("store pending edit")
            self._log_operation("Edit submitted for review", article_id=article_id)
            await self.requests.send_edit_request(article_id)
        else:
            for name in EDITABLE_FIELDS:
                setattr(article, name, values[name])
            article.preview = make_preview(fields.preview, fields.body)
            article.allow_comments = fields.allow_comments
            article.status = ArticleStatus.PENDING
            article.rejection_reason = None
            article.pending_edit = None
            await self._commit("resubmit article")
            self._log_operation("Article resubmitted", article_id=article_id)
            await self.requests.send_article_request(article_id)

        return await self._reload(article_id)

    async def _reload(self, article_id: str) -> Article:
        article = await self._execute_db_operation(
            "reload article", self.article_repo.get_by_id(article_id)
        )
        await self.session.refresh(article)
        return article
