"""
Article Model.

A user-submitted article and its moderation state.

Live fields (title, body, preview, media, category, anonymity) are what
readers see. While an approved article is being edited, the proposed values
sit in `pending_edit` until a moderator decides on them.
"""

import enum
from typing import Any

from sqlalchemy import JSON, BigInteger, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from articlehub.backend.models.base import Base, TimestampMixin, UUIDMixin
from articlehub.backend.models.profile import Profile


class ArticleStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MediaType(str, enum.Enum):
    IMAGE = "image"
    YOUTUBE = "youtube"


# Fields that an edit may change, in the order they are shadowed.
EDITABLE_FIELDS = (
    "title",
    "body",
    "preview",
    "media_url",
    "media_type",
    "category_id",
    "is_anonymous",
)


class Article(UUIDMixin, TimestampMixin, Base):
    """Article database model."""

    __tablename__ = "articles"

    author_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    preview: Mapped[str | None] = mapped_column(String(200), nullable=True)
    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(default=False, nullable=False)
    allow_comments: Mapped[bool] = mapped_column(default=True, nullable=False)
    status: Mapped[ArticleStatus] = mapped_column(
        Enum(ArticleStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=ArticleStatus.PENDING,
        nullable=False,
        index=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    pending_edit: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    telegram_message_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    author: Mapped[Profile] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, status={self.status.value})>"
