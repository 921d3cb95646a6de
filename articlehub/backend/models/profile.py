"""
Profile Model.

A Mini App user, keyed by their Telegram id.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from articlehub.backend.models.base import Base, TimestampMixin, UUIDMixin


class Profile(UUIDMixin, TimestampMixin, Base):
    """Profile database model."""

    __tablename__ = "profiles"

    telegram_id: Mapped[int | None] = mapped_column(
        BigInteger,
        unique=True,
        nullable=True,
        index=True,
    )
    username: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_premium: Mapped[bool] = mapped_column(default=False, nullable=False)
    premium_expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    reputation: Mapped[int] = mapped_column(default=0, nullable=False)

    @property
    def display_name(self) -> str:
        return self.first_name or "Unknown"

    @property
    def handle(self) -> str:
        """`@username` or an empty string."""
        return f"@{self.username}" if self.username else ""

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, telegram_id={self.telegram_id})>"
