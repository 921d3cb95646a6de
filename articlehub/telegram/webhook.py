"""
Webhook Endpoints for the Telegram Bots.

Provides a FastAPI router per bot. Each update is validated against the
shared secret header and fed to the bot's dispatcher.
"""

import hmac
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response

from articlehub.backend.core.logging import get_logger, log_with_source

if TYPE_CHECKING:
    from aiogram import Bot, Dispatcher

logger = get_logger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def get_webhook_router(bot: "Bot", dp: "Dispatcher", path: str, secret: str) -> APIRouter:
    """
    Create a FastAPI router for one bot's webhook.

    Args:
        bot: aiogram Bot instance
        dp: aiogram Dispatcher instance
        path: URL path the bot's webhook is registered at
        secret: Expected secret header value; empty disables the check

    Returns:
        FastAPI APIRouter with the webhook endpoint

    Usage:
        router = get_webhook_router(
            get_admin_bot(), get_admin_dispatcher(), "/webhook/telegram/admin", secret
        )
        app.include_router(router)
    """
    from aiogram.types import Update

    router = APIRouter(tags=["telegram"])

    @router.post(path)
    async def telegram_webhook(request: Request) -> Response:
        """
        Handle incoming Telegram webhook requests.

        Returns 403 on a bad secret and 500 when the update cannot be processed,
        so Telegram redelivers it.
        """
        if secret:
            secret_header = request.headers.get(SECRET_HEADER)
            if not secret_header or not hmac.compare_digest(secret_header, secret):
                logger.warning(
                    "Invalid webhook secret token",
                    extra={
                        "path": path,
                        "client_ip": request.client.host if request.client else None,
                    },
                )
                return Response(status_code=403)

        try:
            update_data = await request.json()
            update = Update.model_validate(update_data, context={"bot": bot})

            logger.debug(
                "Received Telegram update",
                extra={
                    "path": path,
                    "update_id": update.update_id,
                    "update_type": update.event_type,
                },
            )

            await dp.feed_update(bot, update)

        except Exception as e:
            log_with_source(
                logger,
                "telegram",
                "error",
                "Error processing Telegram update",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Response(status_code=500)

        return Response(status_code=200)

    return router


def get_webhook_url(base_url: str, path: str) -> str:
    """
    Construct the full webhook URL.

    Args:
        base_url: Base URL of the application (e.g., https://example.com)
        path: Webhook path of the bot
    """
    return f"{base_url.rstrip('/')}{path}"
