"""
Logging Middleware.

Logs every incoming update of either bot with structured context and timing.
"""

import time
from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update

from articlehub.backend.core.logging import get_logger, log_with_source
from articlehub.telegram.callbacks import CallbackAction

logger = get_logger(__name__)


class LoggingMiddleware(BaseMiddleware):
    """
    Logs update id and type, the acting user, the chat, and processing time.

    Free text is never logged; support questions and rejection reasons are
    reduced to their length.

    Usage:
        dp.update.outer_middleware(LoggingMiddleware(bot_name="admin"))
    """

    def __init__(self, bot_name: str) -> None:
        self.bot_name = bot_name

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        start_time = time.perf_counter()
        context = self._extract_context(event)

        log_with_source(logger, "telegram", "info", "Telegram update received", **context)

        try:
            result = await handler(event, data)
        except Exception as e:
            log_with_source(
                logger,
                "telegram",
                "error",
                "Telegram update processing error",
                error=str(e),
                error_type=type(e).__name__,
                elapsed_ms=round((time.perf_counter() - start_time) * 1000, 2),
                **context,
            )
            raise

        log_with_source(
            logger,
            "telegram",
            "debug",
            "Telegram update processed",
            elapsed_ms=round((time.perf_counter() - start_time) * 1000, 2),
            **context,
        )
        return result

    def _extract_context(self, event: TelegramObject) -> dict[str, Any]:
        context: dict[str, Any] = {"bot": self.bot_name}

        if not isinstance(event, Update):
            return context

        context["update_id"] = event.update_id
        context["update_type"] = event.event_type

        if event.message:
            msg = event.message
            context["chat_id"] = msg.chat.id
            if msg.from_user:
                context["user_id"] = msg.from_user.id
            if msg.text and msg.text.startswith("/"):
                context["command"] = msg.text.split()[0]
            elif msg.text:
                context["text_length"] = len(msg.text)
            if msg.reply_to_message:
                context["reply_to"] = msg.reply_to_message.message_id

        elif event.callback_query:
            cb = event.callback_query
            context["user_id"] = cb.from_user.id
            if cb.message:
                context["chat_id"] = cb.message.chat.id
            action = CallbackAction.parse(cb.data)
            context["callback_verb"] = action.raw_verb

        return context
