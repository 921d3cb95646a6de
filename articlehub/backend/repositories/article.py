"""
Article Repository.
"""

from sqlalchemy import func, select

from articlehub.backend.models.article import Article, ArticleStatus
from articlehub.backend.repositories.base import BaseRepository


class ArticleRepository(BaseRepository[Article]):
    model = Article

    async def count_by_status(self) -> dict[ArticleStatus, int]:
        """Article counts keyed by status; statuses with no rows map to 0."""
        result = await self.session.execute(
            select(Article.status, func.count()).group_by(Article.status)
        )
        counts = {status: 0 for status in ArticleStatus}
        for status, count in result.all():
            counts[ArticleStatus(status)] = int(count)
        return counts

    async def get_latest_pending(self, limit: int) -> list[Article]:
        result = await self.session.execute(
            select(Article)
            .where(Article.status == ArticleStatus.PENDING)
            .order_by(Article.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def find_ids_by_prefix(self, prefix: str, limit: int = 2) -> list[str]:
        """Article ids starting with prefix; at most `limit` of them."""
        result = await self.session.execute(
            select(Article.id).where(Article.id.startswith(prefix, autoescape=True)).limit(limit)
        )
        return list(result.scalars().all())
