"""
Notification Service.

Best-effort delivery of Telegram messages. Two channels exist:

- the user channel (support bot), used to reach article authors and
  support askers
- the admin channel (admin bot), used for moderation requests,
  confirmations and keyboard edits

Every call is attempted once and never raises. Failures are logged and
reported in the returned NotificationResult; they never undo state that
was already committed.

Usage:
    notifier = get_notification_dispatcher()
    await notifier.notify_author(author.telegram_id, "Your article was approved")
    await notifier.notify_admin_channel(text, reply_markup=keyboard)
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from articlehub.backend.core.logging import get_logger, log_with_source
from articlehub.backend.core.utils import utc_now

if TYPE_CHECKING:
    from aiogram import Bot

logger = get_logger(__name__)


@dataclass
class NotificationResult:
    """Result of a notification send attempt."""

    success: bool
    chat_id: int
    message_id: int | None = None
    error: str | None = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class BroadcastSummary:
    sent: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.sent + self.failed


class NotificationService:
    """
    Sends messages through one bot.

    Usage:
        service = NotificationService(bot, channel="admin")
        result = await service.send(chat_id, "Hello!")
    """

    def __init__(self, bot: "Bot", channel: str) -> None:
        self._bot = bot
        self._channel = channel

    def _log_failure(self, action: str, chat_id: int, error: Exception) -> NotificationResult:
        log_with_source(
            logger,
            "telegram",
            "error",
            "Telegram delivery failed",
            channel=self._channel,
            action=action,
            chat_id=chat_id,
            error=str(error),
        )
        return NotificationResult(success=False, chat_id=chat_id, error=str(error))

    async def send(
        self,
        chat_id: int,
        text: str,
        reply_markup: Any = None,
        disable_notification: bool = False,
    ) -> NotificationResult:
        """
        Send a message to a chat.

        Args:
            chat_id: Telegram chat or user ID
            text: Message text (HTML)
            reply_markup: Optional keyboard markup
            disable_notification: Send silently

        Returns:
            NotificationResult with success status
        """
        try:
            message = await self._bot.send_message(
                chat_id=chat_id,
                text=text,
                reply_markup=reply_markup,
                disable_notification=disable_notification,
            )
        except Exception as e:
            return self._log_failure("send_message", chat_id, e)

        log_with_source(
            logger,
            "telegram",
            "info",
            "Notification sent",
            channel=self._channel,
            chat_id=chat_id,
            message_id=message.message_id,
        )
        return NotificationResult(success=True, chat_id=chat_id, message_id=message.message_id)

    async def send_photo(
        self,
        chat_id: int,
        photo: bytes,
        caption: str,
        reply_markup: Any = None,
        filename: str = "photo.jpg",
    ) -> NotificationResult:
        """Send raw image bytes with an HTML caption."""
        from aiogram.types import BufferedInputFile

        try:
            message = await self._bot.send_photo(
                chat_id=chat_id,
                photo=BufferedInputFile(photo, filename=filename),
                caption=caption,
                reply_markup=reply_markup,
            )
        except Exception as e:
            return self._log_failure("send_photo", chat_id, e)

        log_with_source(
            logger,
            "telegram",
            "info",
            "Photo sent",
            channel=self._channel,
            chat_id=chat_id,
            message_id=message.message_id,
        )
        return NotificationResult(success=True, chat_id=chat_id, message_id=message.message_id)

    async def edit_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: Any = None,
    ) -> NotificationResult:
        """Replace the text (and keyboard) of an existing message."""
        try:
            await self._bot.edit_message_text(
                chat_id=chat_id,
                message_id=message_id,
                text=text,
                reply_markup=reply_markup,
            )
        except Exception as e:
            return self._log_failure("edit_message_text", chat_id, e)
        return NotificationResult(success=True, chat_id=chat_id, message_id=message_id)

    async def strip_keyboard(self, chat_id: int, message_id: int) -> NotificationResult:
        """Remove the inline keyboard from a message."""
        try:
            await self._bot.edit_message_reply_markup(
                chat_id=chat_id,
                message_id=message_id,
                reply_markup=None,
            )
        except Exception as e:
            return self._log_failure("edit_message_reply_markup", chat_id, e)
        return NotificationResult(success=True, chat_id=chat_id, message_id=message_id)

    async def broadcast(
        self,
        chat_ids: list[int],
        text: str,
        delay_between: float = 0.05,
    ) -> BroadcastSummary:
        """
        Send the same message to many chats, one after another.

        Args:
            chat_ids: Recipients
            text: Message text
            delay_between: Pause between sends, in seconds

        Returns:
            Sent and failed counts
        """
        summary = BroadcastSummary()

        for chat_id in chat_ids:
            result = await self.send(chat_id, text)
            if result.success:
                summary.sent += 1
            else:
                summary.failed += 1

            if delay_between > 0:
                await asyncio.sleep(delay_between)

        log_with_source(
            logger,
            "telegram",
            "info",
            "Broadcast completed",
            channel=self._channel,
            total=summary.total,
            sent=summary.sent,
            failed=summary.failed,
        )
        return summary


class NotificationDispatcher:
    """
    Routes notifications to the right bot.

    Authors and support askers are reached through the user channel.
    Everything addressed to moderators goes through the admin channel,
    by default to the configured admin chat.
    """

    def __init__(
        self,
        user_channel: NotificationService,
        admin_channel: NotificationService,
        admin_chat_id: int,
    ) -> None:
        self.user_channel = user_channel
        self.admin_channel = admin_channel
        self.admin_chat_id = admin_chat_id

    async def notify_author(self, telegram_id: int, text: str) -> NotificationResult:
        return await self.user_channel.send(telegram_id, text)

    async def notify_admin_channel(
        self,
        text: str,
        reply_markup: Any = None,
        chat_id: int | None = None,
    ) -> NotificationResult:
        """Message the admin chat, or `chat_id` when the reply belongs elsewhere."""
        target = chat_id if chat_id is not None else self.admin_chat_id
        return await self.admin_channel.send(target, text, reply_markup=reply_markup)

    async def send_admin_photo(
        self,
        photo: bytes,
        caption: str,
        reply_markup: Any = None,
    ) -> NotificationResult:
        return await self.admin_channel.send_photo(
            self.admin_chat_id, photo, caption, reply_markup=reply_markup
        )

    async def edit_admin_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: Any = None,
    ) -> NotificationResult:
        return await self.admin_channel.edit_text(chat_id, message_id, text, reply_markup)

    async def strip_keyboard(self, chat_id: int, message_id: int) -> NotificationResult:
        return await self.admin_channel.strip_keyboard(chat_id, message_id)

    async def broadcast(self, telegram_ids: list[int], text: str) -> BroadcastSummary:
        return await self.user_channel.broadcast(telegram_ids, text)


_notification_dispatcher: NotificationDispatcher | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """Get or create the dispatcher over the admin and support bots."""
    global _notification_dispatcher
    if _notification_dispatcher is None:
        from articlehub.backend.core.config import get_app_config
        from articlehub.telegram.bot import get_admin_bot, get_user_bot

        _notification_dispatcher = NotificationDispatcher(
            user_channel=NotificationService(get_user_bot(), channel="user"),
            admin_channel=NotificationService(get_admin_bot(), channel="admin"),
            admin_chat_id=get_app_config().application.telegram.admin_chat_id,
        )
    return _notification_dispatcher
