"""
Moderation Repositories.

Persistence for short tokens, open reject flows and the moderation log.
"""

from sqlalchemy import delete, select

from articlehub.backend.models.moderation import (
    ModerationAction,
    ModerationLog,
    ModerationShortId,
    PendingRejection,
)
from articlehub.backend.repositories.base import BaseRepository


class ShortIdRepository(BaseRepository[ModerationShortId]):
    model = ModerationShortId

    async def get_by_article_id(self, article_id: str) -> ModerationShortId | None:
        result = await self.session.execute(
            select(ModerationShortId).where(ModerationShortId.article_id == article_id)
        )
        return result.scalar_one_or_none()

    async def get_by_short_id(self, short_id: str) -> ModerationShortId | None:
        result = await self.session.execute(
            select(ModerationShortId).where(ModerationShortId.short_id == short_id)
        )
        return result.scalar_one_or_none()


class PendingRejectionRepository(BaseRepository[PendingRejection]):
    model = PendingRejection

    async def get_latest_for_admin(self, admin_telegram_id: int) -> PendingRejection | None:
        """Most recent open reject flow for this admin (created_at, then id)."""
        result = await self.session.execute(
            select(PendingRejection)
            .where(PendingRejection.admin_telegram_id == admin_telegram_id)
            .order_by(PendingRejection.created_at.desc(), PendingRejection.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def delete_for_article(self, article_id: str) -> int:
        """Delete every open reject flow for the article. Returns the number deleted."""
        result = await self.session.execute(
            delete(PendingRejection).where(PendingRejection.article_id == article_id)
        )
        return result.rowcount or 0

    async def list_for_article(self, article_id: str) -> list[PendingRejection]:
        result = await self.session.execute(
            select(PendingRejection).where(PendingRejection.article_id == article_id)
        )
        return list(result.scalars().all())


class ModerationLogRepository(BaseRepository[ModerationLog]):
    model = ModerationLog

    async def append(
        self,
        article_id: str,
        moderator_telegram_id: int,
        action: ModerationAction,
        reason: str | None = None,
    ) -> ModerationLog:
        return await self.create(
            article_id=article_id,
            moderator_telegram_id=moderator_telegram_id,
            action=action,
            reason=reason,
        )

    async def list_for_article(self, article_id: str) -> list[ModerationLog]:
        result = await self.session.execute(
            select(ModerationLog)
            .where(ModerationLog.article_id == article_id)
            .order_by(ModerationLog.id)
        )
        return list(result.scalars().all())
