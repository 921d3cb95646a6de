"""
Support Question Repository.
"""

from sqlalchemy import select

from articlehub.backend.models.support import SupportQuestion, SupportStatus
from articlehub.backend.repositories.base import BaseRepository


class SupportQuestionRepository(BaseRepository[SupportQuestion]):
    model = SupportQuestion

    async def get_pending_by_admin_message(
        self, admin_chat_id: int, admin_message_id: int
    ) -> SupportQuestion | None:
        result = await self.session.execute(
            select(SupportQuestion)
            .where(
                SupportQuestion.admin_chat_id == admin_chat_id,
                SupportQuestion.admin_message_id == admin_message_id,
                SupportQuestion.status == SupportStatus.PENDING,
            )
            .order_by(SupportQuestion.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_pending_by_prefix(self, prefix: str) -> SupportQuestion | None:
        """The pending question whose id starts with prefix, if exactly one does."""
        result = await self.session.execute(
            select(SupportQuestion)
            .where(
                SupportQuestion.id.startswith(prefix, autoescape=True),
                SupportQuestion.status == SupportStatus.PENDING,
            )
            .limit(2)
        )
        matches = list(result.scalars().all())
        return matches[0] if len(matches) == 1 else None

    async def get_latest_pending(self, limit: int) -> list[SupportQuestion]:
        result = await self.session.execute(
            select(SupportQuestion)
            .where(SupportQuestion.status == SupportStatus.PENDING)
            .order_by(SupportQuestion.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
