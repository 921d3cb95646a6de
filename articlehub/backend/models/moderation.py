"""
Moderation Models.

Persisted correlation records for the moderation flow:

- ModerationShortId: compact token standing in for an article id in
  callback payloads. One per article, never reassigned.
- PendingRejection: an open "waiting for the reason" window for one admin.
- ModerationLog: append-only audit trail of approve and reject decisions.
"""

import enum

from sqlalchemy import BigInteger, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from articlehub.backend.models.base import Base, CreatedAtMixin


class ModerationAction(str, enum.Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class ModerationShortId(CreatedAtMixin, Base):
    __tablename__ = "moderation_short_ids"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    article_id: Mapped[str] = mapped_column(
        ForeignKey("articles.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    short_id: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<ModerationShortId(short_id={self.short_id!r}, article_id={self.article_id})>"


class PendingRejection(CreatedAtMixin, Base):
    """
    Waiting-for-reason record created by the first phase of a reject.

    The id breaks ties between records created within the same timestamp.
    """

    __tablename__ = "pending_rejections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admin_telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    article_id: Mapped[str] = mapped_column(
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    short_id: Mapped[str] = mapped_column(String(16), nullable=False)


class ModerationLog(CreatedAtMixin, Base):
    __tablename__ = "moderation_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    article_id: Mapped[str] = mapped_column(
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    moderator_telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    action: Mapped[ModerationAction] = mapped_column(
        Enum(ModerationAction, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
