"""
Profile Repository.

Lookups used by ingestion, support and the admin commands.
"""

from sqlalchemy import select

from articlehub.backend.models.profile import Profile
from articlehub.backend.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    model = Profile

    async def get_by_telegram_id(self, telegram_id: int) -> Profile | None:
        result = await self.session.execute(
            select(Profile).where(Profile.telegram_id == telegram_id)
        )
        return result.scalar_one_or_none()

    async def get_page(self, offset: int, limit: int) -> list[Profile]:
        """Newest profiles first."""
        result = await self.session.execute(
            select(Profile)
            .order_by(Profile.created_at.desc(), Profile.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def search_by_username(self, fragment: str) -> list[Profile]:
        """Case-insensitive substring match on username."""
        result = await self.session.execute(
            select(Profile)
            .where(Profile.username.ilike(f"%{fragment}%"))
            .order_by(Profile.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_premium_expiring_first(self, limit: int) -> list[Profile]:
        result = await self.session.execute(
            select(Profile)
            .where(Profile.is_premium.is_(True))
            .order_by(Profile.premium_expires_at.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_reachable_telegram_ids(self) -> list[int]:
        """Telegram ids of every profile that has one."""
        result = await self.session.execute(
            select(Profile.telegram_id).where(Profile.telegram_id.is_not(None))
        )
        return [telegram_id for telegram_id in result.scalars().all()]
