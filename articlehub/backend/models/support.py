"""
Support Question Model.

A question sent to the support bot. `admin_chat_id` and `admin_message_id`
locate the admin-chat message that shows the question; a reply to that
message is the answer. Message ids are only unique within a chat.
"""

import enum
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from articlehub.backend.models.base import Base, CreatedAtMixin, UUIDMixin


class SupportStatus(str, enum.Enum):
    PENDING = "pending"
    ANSWERED = "answered"


class SupportQuestion(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "support_questions"

    user_telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    user_profile_id: Mapped[str | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    question: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[SupportStatus] = mapped_column(
        Enum(SupportStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=SupportStatus.PENDING,
        nullable=False,
        index=True,
    )
    admin_chat_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    admin_message_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    answer: Mapped[str | None] = mapped_column(Text, nullable=True)
    answered_by_telegram_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    answered_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<SupportQuestion(id={self.id}, status={self.status.value})>"
