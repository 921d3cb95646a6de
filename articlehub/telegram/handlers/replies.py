"""
Admin Free-Text Replies.

Any admin text no command handler took goes to the ReplyCorrelator: it may
answer a support question or give a rejection reason. Unknown commands such
as a mistyped /stats end up here too.
"""

from aiogram import F, Router
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import ApplicationError, NotFoundError
from articlehub.backend.core.logging import get_logger
from articlehub.backend.services.replies import ReplyCorrelator
from articlehub.telegram import messages
from articlehub.telegram.services.notifications import NotificationDispatcher

logger = get_logger(__name__)

router = Router(name="replies")


@router.message(F.text)
async def handle_admin_text(
    message: Message,
    session: AsyncSession,
    notifier: NotificationDispatcher,
) -> None:
    reply_to = message.reply_to_message.message_id if message.reply_to_message else None

    try:
        outcome = await ReplyCorrelator(session, notifier).route(
            admin_id=message.from_user.id,
            chat_id=message.chat.id,
            text=message.text,
            reply_to_message_id=reply_to,
        )
    except NotFoundError as e:
        await message.answer(e.message)
        return
    except ApplicationError as e:
        logger.warning("Admin reply failed", extra={"error": e.message, "code": e.code})
        await message.answer(messages.OPERATION_FAILED)
        return

    logger.debug("Admin text routed", extra={"kind": outcome.kind.value})
