"""
Support Bot Handlers.

Open to every Telegram user. /start greets; any other text becomes a support
question relayed to the admin chat.
"""

from aiogram import F, Router
from aiogram.filters import CommandStart
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import ApplicationError
from articlehub.backend.core.logging import get_logger
from articlehub.backend.services.support import SupportService
from articlehub.telegram import messages
from articlehub.telegram.services.notifications import NotificationDispatcher

logger = get_logger(__name__)

router = Router(name="support")


@router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    await message.answer(messages.SUPPORT_GREETING)


@router.message(F.text, ~F.text.startswith("/"))
async def handle_question(
    message: Message,
    session: AsyncSession,
    notifier: NotificationDispatcher,
) -> None:
    user = message.from_user
    try:
        await SupportService(session, notifier).submit_question(
            user_telegram_id=user.id,
            question=message.text,
            user_name=user.first_name,
        )
    except ApplicationError as e:
        logger.warning("Support question not stored", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return

    await message.answer(messages.SUPPORT_QUESTION_RECEIVED)
