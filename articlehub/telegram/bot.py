"""
Bot and Dispatcher Configuration.

Creates the two aiogram bots and their dispatchers:

- admin bot: moderation buttons, admin commands and free-text replies
- support (user) bot: the Mini App bot; relays support questions and
  delivers notifications to authors

Uses lazy initialization to prevent import-time failures.
"""

from typing import TYPE_CHECKING

from articlehub.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from aiogram import Bot, Dispatcher

    from articlehub.telegram.services.notifications import NotificationDispatcher

# Module-level state for lazy initialization
_admin_bot: "Bot | None" = None
_user_bot: "Bot | None" = None
_admin_dispatcher: "Dispatcher | None" = None
_support_dispatcher: "Dispatcher | None" = None


def _create_bot(token: str, env_name: str) -> "Bot":
    from aiogram import Bot
    from aiogram.client.default import DefaultBotProperties
    from aiogram.enums import ParseMode

    if not token:
        raise RuntimeError(
            f"{env_name} not configured. "
            f"Set {env_name} environment variable or configure it in config/.env"
        )

    return Bot(
        token=token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )


def create_admin_bot() -> "Bot":
    """
    Create the admin bot.

    Raises:
        RuntimeError: If ADMIN_BOT_TOKEN is not configured
    """
    from articlehub.backend.core.config import get_settings

    bot = _create_bot(get_settings().admin_bot_token, "ADMIN_BOT_TOKEN")
    logger.info("Admin bot created")
    return bot


def create_user_bot() -> "Bot":
    """
    Create the support (Mini App) bot.

    Raises:
        RuntimeError: If TELEGRAM_BOT_TOKEN is not configured
    """
    from articlehub.backend.core.config import get_settings

    bot = _create_bot(get_settings().telegram_bot_token, "TELEGRAM_BOT_TOKEN")
    logger.info("Support bot created")
    return bot


def create_admin_dispatcher(notifier: "NotificationDispatcher | None" = None) -> "Dispatcher":
    """
    Create the admin dispatcher with its routers and middlewares.

    Args:
        notifier: Injected into every handler as `notifier`; defaults to the
            shared dispatcher over both bots
    """
    from aiogram import Dispatcher

    from articlehub.backend.core.config import get_app_config
    from articlehub.telegram.handlers import get_admin_routers
    from articlehub.telegram.middlewares import setup_admin_middlewares
    from articlehub.telegram.services.notifications import get_notification_dispatcher

    # Continuations live in the database, not in FSM state
    dp = Dispatcher(
        disable_fsm=True,
        notifier=notifier or get_notification_dispatcher(),
    )

    setup_admin_middlewares(dp, get_app_config().application.telegram.admin_user_ids)

    for router in get_admin_routers():
        dp.include_router(router)

    logger.info("Admin dispatcher created with routers and middlewares")
    return dp


def create_support_dispatcher(notifier: "NotificationDispatcher | None" = None) -> "Dispatcher":
    """Create the support bot dispatcher. Open to every Telegram user."""
    from aiogram import Dispatcher

    from articlehub.telegram.handlers import get_support_routers
    from articlehub.telegram.middlewares import setup_support_middlewares
    from articlehub.telegram.services.notifications import get_notification_dispatcher

    dp = Dispatcher(
        disable_fsm=True,
        notifier=notifier or get_notification_dispatcher(),
    )

    setup_support_middlewares(dp)

    for router in get_support_routers():
        dp.include_router(router)

    logger.info("Support dispatcher created with routers and middlewares")
    return dp


def get_admin_bot() -> "Bot":
    global _admin_bot
    if _admin_bot is None:
        _admin_bot = create_admin_bot()
    return _admin_bot


def get_user_bot() -> "Bot":
    global _user_bot
    if _user_bot is None:
        _user_bot = create_user_bot()
    return _user_bot


def get_admin_dispatcher() -> "Dispatcher":
    global _admin_dispatcher
    if _admin_dispatcher is None:
        _admin_dispatcher = create_admin_dispatcher()
    return _admin_dispatcher


def get_support_dispatcher() -> "Dispatcher":
    global _support_dispatcher
    if _support_dispatcher is None:
        _support_dispatcher = create_support_dispatcher()
    return _support_dispatcher


async def setup_webhook(
    bot: "Bot",
    dp: "Dispatcher",
    webhook_url: str,
    secret_token: str,
    request_timeout: int | None = None,
) -> None:
    """
    Configure the webhook for one bot.

    Args:
        bot: Bot instance
        dp: Dispatcher serving that bot, used to limit the update types
        webhook_url: Full webhook URL (e.g., https://example.com/webhook/telegram/admin)
        secret_token: Secret token for webhook validation
        request_timeout: Seconds to wait for the Bot API

    Raises:
        ExternalServiceError: Telegram refused the webhook or could not be reached
    """
    from aiogram.exceptions import TelegramAPIError

    from articlehub.backend.core.exceptions import ExternalServiceError

    try:
        await bot.set_webhook(
            url=webhook_url,
            secret_token=secret_token,
            drop_pending_updates=True,
            allowed_updates=dp.resolve_used_update_types(),
            request_timeout=request_timeout,
        )
    except TelegramAPIError as e:
        logger.error(
            "Webhook registration failed",
            extra={"webhook_url": webhook_url, "error": str(e)},
        )
        raise ExternalServiceError(f"Telegram rejected webhook {webhook_url}") from e
    logger.info("Webhook configured", extra={"webhook_url": webhook_url})


async def cleanup_bot(bot: "Bot") -> None:
    """
    Cleanup bot resources on shutdown.

    Args:
        bot: Bot instance to cleanup
    """
    await bot.delete_webhook()
    await bot.session.close()
    logger.info("Bot webhook deleted and session closed")


async def close_bots() -> None:
    """Delete webhooks and close sessions of every bot created so far."""
    global _admin_bot, _user_bot, _admin_dispatcher, _support_dispatcher

    for bot in (_admin_bot, _user_bot):
        if bot is not None:
            await cleanup_bot(bot)

    _admin_bot = None
    _user_bot = None
    _admin_dispatcher = None
    _support_dispatcher = None
