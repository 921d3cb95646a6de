"""
Profile Service.

Profile upsert for the Mini App, plus the admin-bot views over profiles:
statistics, the paged user list, search and premium management.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import NotFoundError
from articlehub.backend.core.security import TelegramUser
from articlehub.backend.core.utils import utc_now
from articlehub.backend.models.article import ArticleStatus
from articlehub.backend.models.profile import Profile
from articlehub.backend.repositories.article import ArticleRepository
from articlehub.backend.repositories.profile import ProfileRepository
from articlehub.backend.services.base import BaseService
from articlehub.telegram import messages
from articlehub.telegram.services.notifications import BroadcastSummary, NotificationDispatcher

PREMIUM_PERIOD = timedelta(days=30)
PREMIUM_OVERVIEW_LIMIT = 10


@dataclass(frozen=True)
class ProjectStats:
    users: int
    premium_users: int
    articles: dict[ArticleStatus, int]


@dataclass(frozen=True)
class UsersPage:
    profiles: list[Profile]
    total: int
    page: int
    total_pages: int


def extended_expiry(current: datetime | None, now: datetime) -> datetime:
    """Add one premium period to whichever is later: now or the current expiry."""
    start = current if current is not None and current > now else now
    return start + PREMIUM_PERIOD


class ProfileService(BaseService):
    def __init__(self, session: AsyncSession, notifier: NotificationDispatcher | None = None) -> None:
        super().__init__(session)
        self.notifier = notifier
        self.profile_repo = ProfileRepository(session)
        self.article_repo = ArticleRepository(session)

    async def upsert_from_telegram(self, user: TelegramUser) -> Profile:
        """Create the profile for a verified Telegram user, or refresh its names."""
        profile = await self._execute_db_operation(
            "find profile", self.profile_repo.get_by_telegram_id(user.id)
        )
        if profile is None:
            profile = await self._execute_db_operation(
                "create profile",
                self.profile_repo.create(
                    telegram_id=user.id,
                    username=user.username,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    avatar_url=user.photo_url,
                ),
            )
            self._log_operation("Profile created", profile_id=profile.id)
        else:
            profile.username = user.username
            profile.first_name = user.first_name
            profile.last_name = user.last_name
            if user.photo_url:
                profile.avatar_url = user.photo_url
        await self._commit("upsert profile")
        return profile

    async def get_by_telegram_id(self, telegram_id: int) -> Profile:
        profile = await self._execute_db_operation(
            "find profile", self.profile_repo.get_by_telegram_id(telegram_id)
        )
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def get_stats(self) -> ProjectStats:
        users = await self._execute_db_operation("count users", self.profile_repo.count())
        premium = await self._execute_db_operation(
            "count premium users", self.profile_repo.count(Profile.is_premium.is_(True))
        )
        articles = await self._execute_db_operation(
            "count articles", self.article_repo.count_by_status()
        )
        return ProjectStats(users=users, premium_users=premium, articles=articles)

    async def get_users_page(self, page: int, per_page: int) -> UsersPage:
        page = max(page, 0)
        total = await self._execute_db_operation("count users", self.profile_repo.count())
        profiles = await self._execute_db_operation(
            "list users", self.profile_repo.get_page(page * per_page, per_page)
        )
        return UsersPage(
            profiles=profiles,
            total=total,
            page=page,
            total_pages=math.ceil(total / per_page) if per_page else 0,
        )

    async def search(self, query: str) -> list[Profile]:
        """Numeric queries match the Telegram id exactly, others match usernames."""
        cleaned = query.replace("@", "").strip()
        if not cleaned:
            return []
        if cleaned.isdigit():
            profile = await self._execute_db_operation(
                "search by telegram id", self.profile_repo.get_by_telegram_id(int(cleaned))
            )
            return [profile] if profile is not None else []
        return await self._execute_db_operation(
            "search by username", self.profile_repo.search_by_username(cleaned)
        )

    async def get_premium_overview(self) -> tuple[int, list[Profile]]:
        total = await self._execute_db_operation(
            "count premium users", self.profile_repo.count(Profile.is_premium.is_(True))
        )
        profiles = await self._execute_db_operation(
            "list premium users",
            self.profile_repo.get_premium_expiring_first(PREMIUM_OVERVIEW_LIMIT),
        )
        return total, profiles

    async def grant_premium(self, telegram_id: int) -> Profile:
        """Premium for one period from now."""
        profile = await self._find_for_premium(telegram_id)
        profile.is_premium = True
        profile.premium_expires_at = utc_now() + PREMIUM_PERIOD
        await self._commit("grant premium")

        self._log_operation("Premium granted", telegram_id=telegram_id)
        await self._notify_user(telegram_id, messages.premium_granted_user(profile.premium_expires_at))
        return profile

    async def revoke_premium(self, telegram_id: int) -> Profile:
        profile = await self._find_for_premium(telegram_id)
        profile.is_premium = False
        profile.premium_expires_at = None
        await self._commit("revoke premium")

        self._log_operation("Premium revoked", telegram_id=telegram_id)
        await self._notify_user(telegram_id, messages.premium_revoked_user())
        return profile

    async def extend_premium(self, telegram_id: int) -> Profile:
        """One more period, counted from the current expiry if it is still ahead."""
        profile = await self._find_for_premium(telegram_id)
        profile.is_premium = True
        profile.premium_expires_at = extended_expiry(profile.premium_expires_at, utc_now())
        await self._commit("extend premium")

        self._log_operation("Premium extended", telegram_id=telegram_id)
        await self._notify_user(telegram_id, messages.premium_extended_user(profile.premium_expires_at))
        return profile

    async def broadcast(self, text: str) -> BroadcastSummary:
        telegram_ids = await self._execute_db_operation(
            "list broadcast recipients", self.profile_repo.get_reachable_telegram_ids()
        )
        if self.notifier is None or not telegram_ids:
            return BroadcastSummary()
        return await self.notifier.broadcast(telegram_ids, messages.broadcast_message(text))

    async def count_broadcast_recipients(self) -> int:
        return await self._execute_db_operation(
            "count broadcast recipients", self.profile_repo.count(Profile.telegram_id.is_not(None))
        )

    async def _find_for_premium(self, telegram_id: int) -> Profile:
        profile = await self._execute_db_operation(
            "find profile", self.profile_repo.get_by_telegram_id(telegram_id)
        )
        if profile is None:
            raise NotFoundError(messages.TOAST_USER_NOT_FOUND)
        return profile

    async def _notify_user(self, telegram_id: int, text: str) -> None:
        if self.notifier is not None:
            await self.notifier.notify_author(telegram_id, text)
