"""
Short-ID Registry.

Telegram limits callback_data to 64 bytes, so moderation buttons carry an
8-character token instead of the article UUID. Each article gets at most one
token; it never expires and is never reassigned.

Callers must commit their own pending work before calling get_or_create:
a duplicate insert rolls the session back.
"""

import secrets
import string

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import DatabaseError
from articlehub.backend.repositories.article import ArticleRepository
from articlehub.backend.repositories.moderation import ShortIdRepository
from articlehub.backend.services.base import BaseService

SHORT_ID_ALPHABET = string.ascii_letters + string.digits
SHORT_ID_LENGTH = 8
MAX_MINT_ATTEMPTS = 5


def mint_short_id() -> str:
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(SHORT_ID_LENGTH))


def degraded_short_id(article_id: str) -> str:
    """Token used when the registry is unavailable: the article id prefix."""
    return article_id[:SHORT_ID_LENGTH]


class ShortIdRegistry(BaseService):
    """Maps article ids to compact tokens and back."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.short_id_repo = ShortIdRepository(session)
        self.article_repo = ArticleRepository(session)

    async def get_or_create(self, article_id: str) -> str:
        """
        Return the article's token, minting one on first use.

        Never raises for persistence problems: if the registry cannot be
        read or written, the degraded token (article id prefix) is returned.
        It stays resolvable through the prefix fallback in resolve().
        """
        try:
            return await self._get_or_create(article_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            self._logger.warning(
                "Short id registry unavailable, using degraded token",
                extra={"article_id": article_id, "error": str(e)},
            )
            return degraded_short_id(article_id)

    async def _get_or_create(self, article_id: str) -> str:
        existing = await self.short_id_repo.get_by_article_id(article_id)
        if existing is not None:
            return existing.short_id

        for attempt in range(1, MAX_MINT_ATTEMPTS + 1):
            candidate = mint_short_id()
            try:
                await self.short_id_repo.create(article_id=article_id, short_id=candidate)
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                existing = await self.short_id_repo.get_by_article_id(article_id)
                if existing is not None:
                    # Another invocation registered this article first
                    return existing.short_id
                self._logger.info(
                    "Short id collision, minting again",
                    extra={"article_id": article_id, "attempt": attempt},
                )
                continue

            self._log_operation("Short id created", article_id=article_id, short_id=candidate)
            return candidate

        raise SQLAlchemyError(f"No free short id after {MAX_MINT_ATTEMPTS} attempts")

    async def resolve(self, short_id: str) -> str | None:
        """
        Map a token back to its article id.

        Exact registry match first, then a unique article-id prefix match.

        Returns:
            The article id, or None when nothing (or more than one article) matches

        Raises:
            DatabaseError: The store could not be queried
        """
        if not short_id:
            return None

        record = await self._execute_db_operation(
            "resolve short id", self.short_id_repo.get_by_short_id(short_id)
        )
        if record is not None:
            return record.article_id

        matches = await self._execute_db_operation(
            "resolve short id by prefix", self.article_repo.find_ids_by_prefix(short_id)
        )
        if len(matches) == 1:
            return matches[0]
        return None
