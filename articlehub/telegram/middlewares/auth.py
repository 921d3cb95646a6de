"""
Authentication Middleware.

Admin bot access control by Telegram user id. Telegram user ids are
immutable integers that cannot be spoofed within the Telegram API.
"""

from typing import Any, Awaitable, Callable, Iterable

from aiogram import BaseMiddleware
from aiogram.exceptions import TelegramAPIError
from aiogram.types import TelegramObject, Update

from articlehub.backend.core.logging import get_logger
from articlehub.telegram import messages

logger = get_logger(__name__)


class AdminAuthMiddleware(BaseMiddleware):
    """
    Lets only configured administrators through to the admin bot handlers.

    A denied button press is answered with a denial toast, a denied message
    with a denial reply. Nothing else happens: no handler runs and no state
    changes.

    Usage:
        dp.update.outer_middleware(AdminAuthMiddleware(admin_user_ids))
    """

    def __init__(self, admin_user_ids: Iterable[int]) -> None:
        self.admin_user_ids = frozenset(admin_user_ids)

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_user_ids

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        if not isinstance(event, Update):
            return await handler(event, data)

        if event.callback_query:
            user = event.callback_query.from_user
        elif event.message and event.message.from_user:
            user = event.message.from_user
        else:
            # Nothing an administrator could have sent
            return None

        if self.is_admin(user.id):
            data["admin_id"] = user.id
            return await handler(event, data)

        logger.warning(
            "Unauthorized admin bot access attempt",
            extra={"user_id": user.id, "username": user.username},
        )
        try:
            if event.callback_query:
                await event.callback_query.answer(messages.TOAST_ACCESS_DENIED)
            else:
                await event.message.answer(messages.ACCESS_DENIED)
        except TelegramAPIError as e:
            logger.warning("Failed to send access denial", extra={"error": str(e)})
        return None
