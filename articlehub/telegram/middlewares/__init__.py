"""
Telegram Bot Middlewares.

aiogram v3 middleware scopes:
- Outer middleware: Runs on every update (logging, admin auth)
- Inner middleware: Runs after filters pass (database session)
"""

from typing import TYPE_CHECKING, Iterable

from articlehub.telegram.middlewares.auth import AdminAuthMiddleware
from articlehub.telegram.middlewares.database import DatabaseMiddleware
from articlehub.telegram.middlewares.logging import LoggingMiddleware

if TYPE_CHECKING:
    from aiogram import Dispatcher

__all__ = [
    "AdminAuthMiddleware",
    "DatabaseMiddleware",
    "LoggingMiddleware",
    "setup_admin_middlewares",
    "setup_support_middlewares",
]


def setup_admin_middlewares(dp: "Dispatcher", admin_user_ids: Iterable[int]) -> None:
    """
    Middleware order matters:
    1. LoggingMiddleware (outer) - Log all updates, denied ones included
    2. AdminAuthMiddleware (outer) - Deny before any processing
    3. DatabaseMiddleware (inner) - Session only for handled events
    """
    dp.update.outer_middleware(LoggingMiddleware(bot_name="admin"))
    dp.update.outer_middleware(AdminAuthMiddleware(admin_user_ids))

    dp.message.middleware(DatabaseMiddleware())
    dp.callback_query.middleware(DatabaseMiddleware())


def setup_support_middlewares(dp: "Dispatcher") -> None:
    dp.update.outer_middleware(LoggingMiddleware(bot_name="support"))
    dp.message.middleware(DatabaseMiddleware())
