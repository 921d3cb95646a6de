"""
Telegram Bot Module.

aiogram v3 integration for the two bots, running in webhook mode inside the
FastAPI application.

Architecture:
- Both bots run on the same event loop as FastAPI (shared Uvicorn process)
- Bots are a thin presentation layer; all business logic lives in
  articlehub.backend.services

Structure:
    articlehub/telegram/
    ├── bot.py               # Bots and dispatchers
    ├── webhook.py           # Webhook endpoints for FastAPI
    ├── messages.py          # HTML message templates and toasts
    ├── callbacks/           # CallbackAction payload codec
    ├── handlers/            # Admin commands, callback router, replies, support
    ├── keyboards/           # Inline keyboard builders
    ├── middlewares/         # Admin auth, database session, logging
    └── services/            # NotificationDispatcher

Environment Variables:
    ADMIN_BOT_TOKEN: Admin bot token from BotFather
    TELEGRAM_BOT_TOKEN: Support / Mini App bot token
    TELEGRAM_WEBHOOK_SECRET: Secret for webhook validation
"""

from articlehub.telegram.bot import (
    create_admin_bot,
    create_admin_dispatcher,
    create_support_dispatcher,
    create_user_bot,
    get_admin_bot,
    get_admin_dispatcher,
    get_support_dispatcher,
    get_user_bot,
)

__all__ = [
    "create_admin_bot",
    "create_admin_dispatcher",
    "create_support_dispatcher",
    "create_user_bot",
    "get_admin_bot",
    "get_admin_dispatcher",
    "get_support_dispatcher",
    "get_user_bot",
]
